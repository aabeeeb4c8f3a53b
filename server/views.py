"""
Service endpoints and the JSON error handlers Django falls back to.
"""

from django.http import JsonResponse

from server.errors import Gone, NotFound
from server.pipeline import ROUTE_NOT_FOUND, Endpoint

API_INDEX = {
    'success': True,
    'message': 'Comments API - Layered Architecture (Routes -> Views -> Services -> ORM)',
    'architecture': {
        'routes': 'Define HTTP endpoints and their pipelines',
        'views': 'Handle HTTP requests/responses',
        'services': 'Business logic and ORM interactions',
        'models': 'Django ORM models',
    },
    'endpoints': {
        'health': 'GET /health',
        'users': {
            'populate': 'GET /populate - Generate 3 random users',
            'list': 'GET /users - List all users',
            'getById': 'POST /user - Get user by ID (body: {userId: number})',
        },
        'comments': {
            'create': 'POST /comment - Create comment (body: text or {comment: text})',
            'list': 'GET /comments - List all comments',
            'getById': 'GET /comments/:id - Get comment by ID',
            'delete': 'DELETE /comments/:id - Delete comment',
        },
    },
}


def api_index(ctx):
    return JsonResponse(API_INDEX)


def health(ctx):
    return JsonResponse({'success': True, 'status': 'ok', 'message': 'Server is running'})


def deprecated_query(ctx):
    raise Gone(
        'This endpoint has been deprecated for security reasons. '
        'Please use /user endpoint instead.'
    )


api_index_endpoint = Endpoint(api_index)
health_endpoint = Endpoint(health)
deprecated_query_endpoint = Endpoint(deprecated_query)


# Django error handlers, see handler400/403/404/500 in server.urls

def bad_request(request, exception=None):
    return JsonResponse({'success': False, 'error': 'Bad request'}, status=400)


def permission_denied(request, exception=None):
    return JsonResponse({'success': False, 'error': 'Forbidden'}, status=403)


def page_not_found(request, exception=None):
    return NotFound(ROUTE_NOT_FOUND).to_response()


def server_error(request):
    return JsonResponse({'success': False, 'error': 'An error occurred'}, status=500)
