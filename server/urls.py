"""
URL configuration.

Each pattern maps to a ``Route`` whose endpoints declare their own stages
and rate limit classes. Trailing slashes are optional. Anything else falls
through to the catch-all route, which answers 404 after the general rate
limit has been applied.
"""

from django.urls import re_path

from comments import views as comment_views
from server import views
from server.pipeline import Route
from users import views as user_views

urlpatterns = [
    re_path(r'^$', Route(GET=views.api_index_endpoint), name='index'),
    re_path(r'^health/?$', Route(GET=views.health_endpoint), name='health'),
    # Users
    re_path(r'^populate/?$', Route(GET=user_views.populate_endpoint), name='populate'),
    re_path(r'^users/?$', Route(GET=user_views.list_users_endpoint), name='users'),
    re_path(r'^user/?$', Route(POST=user_views.get_user_endpoint), name='user'),
    # Comments
    re_path(r'^comment/?$', Route(POST=comment_views.create_comment_endpoint), name='comment-create'),
    re_path(r'^comments/?$', Route(GET=comment_views.list_comments_endpoint), name='comments'),
    re_path(
        r'^comments/(?P<id>[^/]+)/?$',
        Route(
            GET=comment_views.get_comment_endpoint,
            DELETE=comment_views.delete_comment_endpoint,
        ),
        name='comment-detail',
    ),
    # Removed raw-query endpoint
    re_path(r'^query/?$', Route(POST=views.deprecated_query_endpoint), name='query'),
    re_path(r'', Route(), name='not-found'),
]

handler400 = 'server.views.bad_request'
handler403 = 'server.views.permission_denied'
handler404 = 'server.views.page_not_found'
handler500 = 'server.views.server_error'
