"""
Custom validators for input validation.

Plain Django validators: callables raising ``ValidationError``. They are
wired into the serializer fields in ``input_validation.serializers``.
"""

import re
from typing import Any

from django.core.exceptions import ValidationError


class PositiveIntegerValidator:
    """
    Validates an identifier: a positive integer, given natively or as the
    exact decimal spelling (optional leading ``+``, digits only, no
    whitespace). Leading zeros are allowed: ``'007'`` is 7.
    """

    PATTERN = re.compile(r'^\+?[0-9]+$')
    code = 'invalid_identifier'

    def __init__(self, label: str):
        self.label = label
        self.message = f'{label} must be a positive integer'

    def to_int(self, value: Any) -> int:
        """Return the integer ``value`` denotes, or raise ``ValidationError``."""
        # bool is an int subclass but never an identifier
        if isinstance(value, bool):
            raise ValidationError(self.message, code=self.code)

        if isinstance(value, int):
            number = value
        elif isinstance(value, float) and value.is_integer():
            number = int(value)
        elif isinstance(value, str) and self.PATTERN.fullmatch(value):
            number = int(value)
        else:
            raise ValidationError(self.message, code=self.code)

        if number < 1:
            raise ValidationError(self.message, code=self.code)

        return number

    def __call__(self, value: Any) -> None:
        self.to_int(value)


class ContentLengthValidator:
    """
    Validates content length to prevent DoS attacks via large inputs.
    """

    def __init__(self, max_length: int = 1000, message: str = None):
        self.max_length = max_length
        self.message = message or f'Content must be less than {max_length} characters'

    def __call__(self, value: Any) -> None:
        if isinstance(value, str) and len(value) > self.max_length:
            raise ValidationError(self.message, code='content_too_long')


class NotBlankValidator:
    """Rejects strings that are empty once surrounding whitespace is removed."""

    def __init__(self, message: str = 'This field cannot be empty'):
        self.message = message

    def __call__(self, value: Any) -> None:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(self.message, code='blank')
