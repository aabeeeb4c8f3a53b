"""
Comment operations: one storage call (or one lookup plus one delete) each.
"""

from typing import Optional

from .models import Comment

# Largest primary key the id column can hold
MAX_ID = 2 ** 63 - 1


def create_comment(content: str) -> Comment:
    """Store already sanitized ``content``."""
    return Comment.objects.create(content=content)


def list_comments():
    """Newest first; comments created in the same instant come by id, descending."""
    return Comment.objects.order_by('-created_at', '-id')


def get_comment(comment_id: int) -> Optional[Comment]:
    if comment_id > MAX_ID:
        return None
    return Comment.objects.filter(pk=comment_id).first()


def delete_comment(comment_id: int) -> bool:
    """Returns False if there was no such comment."""
    comment = get_comment(comment_id)
    if comment is None:
        return False

    comment.delete()
    return True
