"""
Tests for the populate_users management command.
"""

from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from users.models import User
from users.tests.fakes import FakeRandomUserClient


@pytest.mark.django_db
class TestPopulateUsersCommand:
    def test_populates(self):
        out = StringIO()
        with mock.patch('users.services.RandomUserClient', return_value=FakeRandomUserClient()):
            call_command('populate_users', stdout=out)

        assert User.objects.count() == 3
        assert 'Successfully created 3 users' in out.getvalue()

    def test_count_and_clear(self):
        User.objects.create(first_name='Old', last_name='User', email='old@example.com', age=50)
        out = StringIO()

        with mock.patch('users.services.RandomUserClient', return_value=FakeRandomUserClient()):
            call_command('populate_users', '--count', '2', '--clear', stdout=out)

        assert list(User.objects.values_list('first_name', flat=True)) == ['Ada', 'Alan']
        assert 'Deleted 1 users' in out.getvalue()

    def test_invalid_count(self):
        with pytest.raises(CommandError):
            call_command('populate_users', '--count', '0', stdout=StringIO())

    def test_upstream_failure(self):
        fake = FakeRandomUserClient(fail=True)
        with mock.patch('users.services.RandomUserClient', return_value=fake):
            with pytest.raises(CommandError):
                call_command('populate_users', stdout=StringIO())
