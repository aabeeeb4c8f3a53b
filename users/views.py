"""
User endpoints.

Handlers receive a ``RequestContext`` whose input has already passed the
endpoint's stages.
"""

from django.http import JsonResponse

from input_validation.payloads import read_body_data
from input_validation.serializers import UserLookupSerializer
from server.errors import NotFound
from server.pipeline import Endpoint, validated_by
from server.security.rate_limit import GENERAL, POPULATE

from . import services
from .serializers import UserSerializer, UserSummarySerializer


def populate(ctx):
    users = services.populate_users()
    return JsonResponse({
        'success': True,
        'message': 'Users populated successfully',
        'users': UserSerializer(users, many=True).data,
    })


def list_users(ctx):
    users = services.list_users()
    return JsonResponse({
        'success': True,
        'users': UserSummarySerializer(users, many=True).data,
    })


def get_user(ctx):
    user = services.get_user(ctx.validated['user_id'])
    if user is None:
        raise NotFound('User not found')

    return JsonResponse({
        'success': True,
        'user': UserSerializer(user).data,
    })


populate_endpoint = Endpoint(
    populate,
    rate_limits=(GENERAL, POPULATE),
    failure_message='Failed to populate users',
)

list_users_endpoint = Endpoint(
    list_users,
    failure_message='Failed to fetch users',
)

get_user_endpoint = Endpoint(
    get_user,
    stages=[validated_by(UserLookupSerializer, lambda ctx: read_body_data(ctx.request))],
    failure_message='Failed to fetch user',
)
