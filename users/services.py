"""
User operations.

Each operation makes the storage calls for one endpoint. Storage errors
(``DatabaseError``) propagate to the endpoint, which answers with its
failure message.
"""

import logging
from typing import List, Optional

from django.conf import settings
from django.db import DatabaseError, transaction

from input_validation.sanitizers import DictSanitizer

from .models import User
from .randomuser import RandomUserClient

logger = logging.getLogger(__name__)

DEFAULT_POPULATE_COUNT = 3

# Largest primary key the id column can hold
MAX_ID = 2 ** 63 - 1

# Names and emails come from a third party and are treated as untrusted
candidate_sanitizer = DictSanitizer(
    html_fields=['first_name', 'last_name'],
    email_fields=['email'],
)


def populate_users(client: Optional[RandomUserClient] = None, count: Optional[int] = None) -> List[User]:
    """
    Fetch ``count`` users from the random-user service and store them.

    The fetch happens before anything is written: if it fails, nothing is
    stored. Creation is one insert per user, in the order received, and is
    not atomic unless ``USERS['ATOMIC_POPULATE']`` is set: a storage failure
    part way leaves the users created before it in place.

    Returns:
        The created users, in creation order
    """
    config = getattr(settings, 'USERS', {})
    count = count or config.get('POPULATE_COUNT', DEFAULT_POPULATE_COUNT)
    client = client or RandomUserClient()

    candidates = client.fetch(count)

    if config.get('ATOMIC_POPULATE', False):
        with transaction.atomic():
            created = _create_all(candidates)
    else:
        created = []
        try:
            for candidate in candidates:
                created.append(_create(candidate))
        except DatabaseError:
            if created:
                logger.warning(
                    'Populate stopped after %d of %d users; created users were kept: %s',
                    len(created),
                    len(candidates),
                    [user.id for user in created],
                )
            raise

    logger.info('Populated %d users', len(created))
    return created


def _create(candidate) -> User:
    return User.objects.create(**candidate_sanitizer.sanitize(candidate.as_dict()))


def _create_all(candidates) -> List[User]:
    return [_create(candidate) for candidate in candidates]


def list_users():
    """All users, reduced to their summary fields."""
    return User.objects.only('id', 'first_name', 'last_name').order_by('id')


def get_user(user_id: int) -> Optional[User]:
    if user_id > MAX_ID:
        return None
    return User.objects.filter(pk=user_id).first()
