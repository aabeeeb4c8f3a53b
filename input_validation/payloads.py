"""
Request body resolution.

The body of a request is read once, here, and handed on in a shape the
validators can rely on.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from django.http import HttpRequest

from server.errors import ValidationFailed, validation_detail

FORM_CONTENT_TYPES = ('application/x-www-form-urlencoded', 'multipart/form-data')

INVALID_JSON_MESSAGE = 'Request body must be valid JSON'


@dataclass(frozen=True)
class TextBody:
    """The whole body is the comment (``text/plain`` or a JSON string)."""

    text: str

    def as_data(self) -> Dict[str, Any]:
        return {'comment': self.text}


@dataclass(frozen=True)
class ObjectBody:
    """A JSON object or form whose ``comment`` field holds a string."""

    comment: str

    def as_data(self) -> Dict[str, Any]:
        return {'comment': self.comment}


@dataclass(frozen=True)
class EmptyBody:
    """No usable comment: missing body, non-string ``comment``, arrays, numbers."""

    def as_data(self) -> Dict[str, Any]:
        return {}


CommentBody = Union[TextBody, ObjectBody, EmptyBody]


def _decode(request: HttpRequest) -> str:
    try:
        return request.body.decode(request.encoding or 'utf-8')
    except UnicodeDecodeError:
        raise ValidationFailed(
            [validation_detail('body', 'Request body must be valid UTF-8 text')]
        )


def read_json_body(request: HttpRequest) -> Optional[Any]:
    """
    Parse a JSON request body.

    Returns:
        The decoded value, or None when the body is empty

    Raises:
        ValidationFailed: if the body is not valid JSON
    """
    raw = _decode(request)
    if not raw.strip():
        return None

    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationFailed([validation_detail('body', INVALID_JSON_MESSAGE)])


def read_body_data(request: HttpRequest) -> Dict[str, Any]:
    """
    Return the body's fields as a dictionary.

    Anything that is not a JSON object or a form yields an empty dictionary,
    so required fields are reported missing.
    """
    if request.content_type == 'application/json':
        data = read_json_body(request)
        return data if isinstance(data, dict) else {}

    if request.content_type in FORM_CONTENT_TYPES:
        return request.POST.dict()

    return {}


def parse_comment_body(request: HttpRequest) -> CommentBody:
    """
    Resolve the body of a comment submission into a ``CommentBody``.

    Raises:
        ValidationFailed: if a JSON body does not parse
    """
    if request.content_type == 'text/plain':
        return TextBody(_decode(request))

    if request.content_type == 'application/json':
        data = read_json_body(request)
        if isinstance(data, str):
            return TextBody(data)
        if isinstance(data, dict) and isinstance(data.get('comment'), str):
            return ObjectBody(data['comment'])
        return EmptyBody()

    if request.content_type in FORM_CONTENT_TYPES:
        comment = request.POST.get('comment')
        if isinstance(comment, str):
            return ObjectBody(comment)

    return EmptyBody()
