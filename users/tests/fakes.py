"""
Test doubles for the random-user service.
"""

from server.errors import UpstreamFailure
from users.randomuser import Candidate


def make_result(first='Ada', last='Lovelace', email='ada@example.com', age=36):
    return {
        'name': {'title': 'Ms', 'first': first, 'last': last},
        'email': email,
        'dob': {'date': '1988-12-10T00:00:00.000Z', 'age': age},
    }


SAMPLE_RESULTS = [
    make_result('Ada', 'Lovelace', 'ada@example.com', 36),
    make_result('Alan', 'Turing', 'alan@example.com', 41),
    make_result('Grace', 'Hopper', 'grace@example.com', 85),
]


class FakeRandomUserClient:
    """Returns canned candidates, or fails like an unreachable service."""

    def __init__(self, results=None, fail=False):
        self.results = SAMPLE_RESULTS if results is None else results
        self.fail = fail
        self.calls = []

    def fetch(self, count):
        self.calls.append(count)
        if self.fail:
            raise UpstreamFailure(detail='connection refused')
        return [Candidate.from_result(result) for result in self.results[:count]]
