"""
Comment Model

``content`` always holds the sanitized text: markup is removed before a
comment is created, and comments are never updated.
"""

from django.db import models


class Comment(models.Model):
    content = models.TextField()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'comments'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.content[:50]
