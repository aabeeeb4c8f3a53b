"""
Comment endpoints.

``POST /comment`` runs: resolve body -> validate -> strip markup -> store.
The sanitized text is what gets stored and echoed back.
"""

from django.http import JsonResponse

from input_validation.payloads import parse_comment_body
from input_validation.sanitizers import strip_markup
from input_validation.serializers import CommentIdSerializer, CommentSubmissionSerializer
from server.errors import NotFound, ValidationFailed, validation_detail
from server.pipeline import Endpoint, validated_by
from server.security.rate_limit import GENERAL, WRITE

from . import services
from .serializers import CommentSerializer

COMMENT_NOT_FOUND = 'Comment not found'


def read_comment_body(ctx):
    ctx.body = parse_comment_body(ctx.request)


def sanitize_comment(ctx):
    content = strip_markup(ctx.validated['comment'])
    if not content.strip():
        raise ValidationFailed(
            [validation_detail('comment', 'Comment cannot be empty after removing markup')]
        )
    ctx.validated['comment'] = content


validate_comment = validated_by(CommentSubmissionSerializer, lambda ctx: ctx.body.as_data())

validate_comment_id = validated_by(CommentIdSerializer, lambda ctx: ctx.params, location='params')


def create_comment(ctx):
    comment = services.create_comment(ctx.validated['comment'])
    return JsonResponse(
        {
            'success': True,
            'message': 'Comment created successfully',
            'comment': CommentSerializer(comment).data,
        },
        status=201,
    )


def list_comments(ctx):
    comments = services.list_comments()
    return JsonResponse({
        'success': True,
        'comments': CommentSerializer(comments, many=True).data,
    })


def get_comment(ctx):
    comment = services.get_comment(ctx.validated['id'])
    if comment is None:
        raise NotFound(COMMENT_NOT_FOUND)

    return JsonResponse({
        'success': True,
        'comment': CommentSerializer(comment).data,
    })


def delete_comment(ctx):
    if not services.delete_comment(ctx.validated['id']):
        raise NotFound(COMMENT_NOT_FOUND)

    return JsonResponse({
        'success': True,
        'message': 'Comment deleted successfully',
    })


create_comment_endpoint = Endpoint(
    create_comment,
    stages=[read_comment_body, validate_comment, sanitize_comment],
    rate_limits=(GENERAL, WRITE),
    failure_message='Failed to create comment',
)

list_comments_endpoint = Endpoint(
    list_comments,
    failure_message='Failed to fetch comments',
)

get_comment_endpoint = Endpoint(
    get_comment,
    stages=[validate_comment_id],
    failure_message='Failed to fetch comment',
)

delete_comment_endpoint = Endpoint(
    delete_comment,
    stages=[validate_comment_id],
    rate_limits=(GENERAL, WRITE),
    failure_message='Failed to delete comment',
)
