"""
Tests for request body resolution.
"""

import json

from django.test import RequestFactory, TestCase

from input_validation.payloads import (
    EmptyBody,
    ObjectBody,
    TextBody,
    parse_comment_body,
    read_body_data,
    read_json_body,
)
from server.errors import ValidationFailed


class ParseCommentBodyTests(TestCase):
    """Tests for parse_comment_body."""

    def setUp(self):
        self.factory = RequestFactory()

    def post(self, data, content_type):
        return self.factory.post('/comment', data=data, content_type=content_type)

    def test_plain_text(self):
        body = parse_comment_body(self.post('hello <b>you</b>', 'text/plain'))
        self.assertEqual(body, TextBody('hello <b>you</b>'))

    def test_plain_text_that_looks_like_json(self):
        body = parse_comment_body(self.post('{"comment": "x"}', 'text/plain'))
        self.assertEqual(body, TextBody('{"comment": "x"}'))

    def test_json_string(self):
        body = parse_comment_body(self.post(json.dumps('hello'), 'application/json'))
        self.assertEqual(body, TextBody('hello'))

    def test_json_object(self):
        body = parse_comment_body(self.post({'comment': 'hello'}, 'application/json'))
        self.assertEqual(body, ObjectBody('hello'))
        self.assertEqual(body.as_data(), {'comment': 'hello'})

    def test_unusable_json(self):
        for data in [{'comment': 5}, {'text': 'x'}, [1], 3, None]:
            with self.subTest(data=data):
                body = parse_comment_body(self.post(json.dumps(data), 'application/json'))
                self.assertEqual(body, EmptyBody())
                self.assertEqual(body.as_data(), {})

    def test_empty_json_body(self):
        self.assertEqual(parse_comment_body(self.post('', 'application/json')), EmptyBody())

    def test_malformed_json(self):
        with self.assertRaises(ValidationFailed) as cm:
            parse_comment_body(self.post('{"comment":', 'application/json'))

        self.assertEqual(cm.exception.details[0]['message'], 'Request body must be valid JSON')

    def test_invalid_utf8(self):
        with self.assertRaises(ValidationFailed):
            parse_comment_body(self.post(b'\xff\xfe', 'text/plain'))

    def test_form(self):
        request = self.factory.post('/comment', data={'comment': 'from a form'})
        self.assertEqual(parse_comment_body(request), ObjectBody('from a form'))

    def test_form_without_comment(self):
        request = self.factory.post('/comment', data={'other': 'x'})
        self.assertEqual(parse_comment_body(request), EmptyBody())

    def test_other_content_type(self):
        self.assertEqual(parse_comment_body(self.post('<x/>', 'application/xml')), EmptyBody())


class ReadBodyDataTests(TestCase):
    """Tests for read_body_data and read_json_body."""

    def setUp(self):
        self.factory = RequestFactory()

    def test_json_object(self):
        request = self.factory.post('/user', data={'userId': 3}, content_type='application/json')
        self.assertEqual(read_body_data(request), {'userId': 3})

    def test_json_non_object(self):
        request = self.factory.post('/user', data='[3]', content_type='application/json')
        self.assertEqual(read_body_data(request), {})

    def test_form(self):
        request = self.factory.post('/user', data={'userId': '3'})
        self.assertEqual(read_body_data(request), {'userId': '3'})

    def test_plain_text(self):
        request = self.factory.post('/user', data='3', content_type='text/plain')
        self.assertEqual(read_body_data(request), {})

    def test_read_json_body_empty(self):
        request = self.factory.post('/user', data='   ', content_type='application/json')
        self.assertIsNone(read_json_body(request))
