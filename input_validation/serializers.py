"""
Request serializers.

DRF serializers that validate incoming data and collect every violation
for the failure envelope. Each field reports all of its failures at once:
a missing identifier is both "required" and "not a positive integer".
"""

from typing import Any, Dict, List

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework.fields import empty

from server.errors import validation_detail

from .validators import ContentLengthValidator, NotBlankValidator, PositiveIntegerValidator

COMMENT_MAX_LENGTH = 1000


class IdentifierField(serializers.Field):
    """
    Positive integer identifier, accepted natively or as its decimal spelling.
    """

    def __init__(self, label_text: str, *args, **kwargs):
        self.label_text = label_text
        self.validator = PositiveIntegerValidator(label_text)
        super().__init__(*args, **kwargs)

    def run_validation(self, data: Any = empty) -> int:
        if data is empty:
            raise serializers.ValidationError(
                [f'{self.label_text} is required', self.validator.message]
            )

        try:
            return self.validator.to_int(data)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)

    def to_representation(self, value: int) -> int:
        return value


class CommentTextField(serializers.Field):
    """
    Free comment text. The value is trimmed, then must be non-empty and at
    most 1000 characters long.
    """

    default_error_messages = {
        'required': 'Comment text is required',
        'blank': 'Comment cannot be empty',
        'max_length': f'Comment must be less than {COMMENT_MAX_LENGTH} characters',
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.validators = [
            NotBlankValidator(message=self.error_messages['blank']),
            ContentLengthValidator(
                max_length=COMMENT_MAX_LENGTH,
                message=self.error_messages['max_length'],
            ),
        ]

    def run_validation(self, data: Any = empty) -> str:
        if data is empty or not isinstance(data, str):
            raise serializers.ValidationError(
                [self.error_messages['required'], self.error_messages['blank']]
            )

        value = data.strip()
        self.run_validators(value)
        return value

    def to_representation(self, value: str) -> str:
        return value


class UserLookupSerializer(serializers.Serializer):
    """Body of ``POST /user``."""

    userId = IdentifierField('userId', source='user_id')


class CommentIdSerializer(serializers.Serializer):
    """``:id`` segment of the comment paths."""

    id = IdentifierField('Comment ID')


class CommentSubmissionSerializer(serializers.Serializer):
    """Body of ``POST /comment``, after resolving it to ``{'comment': text}``."""

    comment = CommentTextField()


def error_details(errors: Dict[str, Any], location: str) -> List[Dict[str, str]]:
    """
    Flatten ``serializer.errors`` into the envelope's ``details`` entries.

    Args:
        errors: Errors as produced by a DRF serializer
        location: Where the fields came from ('body', 'params', ...)
    """
    details = []

    for field, messages in errors.items():
        if field == 'non_field_errors':
            field = location
        if not isinstance(messages, list):
            messages = [messages]
        for message in messages:
            details.append(validation_detail(field, str(message), location))

    return details
