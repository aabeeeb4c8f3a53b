"""
Random user service client.

Fetches candidate users from https://randomuser.me. The service is treated
as unreliable: network errors, timeouts, bad status codes and malformed
payloads all surface as ``UpstreamFailure``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

from server.errors import UpstreamFailure

logger = logging.getLogger(__name__)

DEFAULT_URL = 'https://randomuser.me/api/'
DEFAULT_TIMEOUT = 10


@dataclass(frozen=True)
class Candidate:
    """A user as received from the service, before it is stored."""

    first_name: str
    last_name: str
    email: str
    age: int

    @classmethod
    def from_result(cls, result: Dict[str, Any]) -> 'Candidate':
        try:
            age = result['dob']['age']
            if isinstance(age, bool) or not isinstance(age, int):
                raise TypeError(f'age is {type(age).__name__}')
            return cls(
                first_name=str(result['name']['first']),
                last_name=str(result['name']['last']),
                email=str(result['email']),
                age=age,
            )
        except (KeyError, TypeError) as e:
            raise UpstreamFailure(detail=f'Malformed user record: {e}')

    def as_dict(self) -> Dict[str, Any]:
        return {
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
            'age': self.age,
        }


class RandomUserClient:
    """
    Client for the randomuser.me API.

    Example:
        client = RandomUserClient()
        for candidate in client.fetch(3):
            print(candidate.email)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Service endpoint (default: USERS['RANDOM_USER_URL'])
            timeout: Request timeout in seconds (default: USERS['TIMEOUT'])
            session: HTTP session to use, mainly for tests
        """
        config = getattr(settings, 'USERS', {})
        self.base_url = base_url or config.get('RANDOM_USER_URL', DEFAULT_URL)
        self.timeout = timeout if timeout is not None else config.get('TIMEOUT', DEFAULT_TIMEOUT)
        self.session = session or requests.Session()

    def fetch(self, count: int) -> List[Candidate]:
        """
        Fetch exactly ``count`` candidates, in the order the service sent them.

        Raises:
            UpstreamFailure: if the service cannot be reached or answers
                with anything but ``count`` well-formed users
        """
        logger.info('Fetching %d users from %s', count, self.base_url)

        try:
            response = self.session.get(
                self.base_url, params={'results': count}, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.Timeout as e:
            raise UpstreamFailure(detail=f'Random user service timed out: {e}')
        except requests.RequestException as e:
            raise UpstreamFailure(detail=f'Random user service request failed: {e}')
        except ValueError as e:
            raise UpstreamFailure(detail=f'Random user service sent invalid JSON: {e}')

        results = payload.get('results') if isinstance(payload, dict) else None
        if not isinstance(results, list):
            raise UpstreamFailure(detail='Random user service response has no results')

        if len(results) != count:
            raise UpstreamFailure(
                detail=f'Random user service returned {len(results)} users, expected {count}'
            )

        return [Candidate.from_result(result) for result in results]
