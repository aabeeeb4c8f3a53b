"""
Input sanitization utilities.

Markup is removed with an HTML tokenizer rather than a regular expression:
every tag, comment and declaration is dropped, ``script``/``style`` elements
lose their bodies too, and the text between tags is kept exactly as typed.
"""

import re
from html.parser import HTMLParser
from typing import Any, Dict, List, Optional

# '<' that would still open a tag, comment or declaration
DANGLING_OPENER = re.compile(r'<(?=[A-Za-z/!?])')

# Elements whose content is dropped together with the tags
STRIP_BODY_ELEMENTS = {'script', 'style'}


class MarkupStripper(HTMLParser):
    """
    Collects the text of an HTML fragment, dropping all markup.

    ``&`` is escaped before feeding, so the parser's character reference
    conversion gives back the text as it was typed instead of decoding
    entities.
    """

    def __init__(self):
        super().__init__(convert_charrefs=True)
        self._chunks: List[str] = []
        self._skipping: Optional[str] = None

    def handle_starttag(self, tag, attrs):
        if tag in STRIP_BODY_ELEMENTS and self._skipping is None:
            self._skipping = tag

    def handle_startendtag(self, tag, attrs):
        pass

    def handle_endtag(self, tag):
        if tag == self._skipping:
            self._skipping = None

    def handle_data(self, data):
        if self._skipping is None:
            self._chunks.append(data)

    def get_text(self) -> str:
        return ''.join(self._chunks)

    @classmethod
    def strip(cls, value: str) -> str:
        parser = cls()
        parser.feed(value.replace('&', '&amp;'))
        parser.close()
        return parser.get_text()


def strip_markup(value: str) -> str:
    """
    Remove all markup from ``value``.

    The pass is repeated until the text stops changing, so nested tricks
    such as ``<scr<script>ipt>`` cannot reassemble a tag, and the result is
    stable: ``strip_markup(strip_markup(t)) == strip_markup(t)``.

    Args:
        value: Untrusted text

    Returns:
        The text with tags, comments, declarations, script/style bodies,
        dangling tag openers and NUL characters removed
    """
    value = value.replace('\x00', '')

    while True:
        stripped = MarkupStripper.strip(value)
        stripped = DANGLING_OPENER.sub('', stripped)
        if stripped == value:
            return stripped
        value = stripped


class InputSanitizer:
    """
    Main sanitizer class for cleaning user input.
    """

    @staticmethod
    def sanitize_html(value: str) -> str:
        """
        Remove all markup from untrusted text to prevent XSS attacks.

        Non-string values are returned unchanged.
        """
        if not isinstance(value, str):
            return value

        return strip_markup(value)

    @staticmethod
    def sanitize_email(value: str) -> str:
        """
        Sanitize email addresses to prevent injection attacks.

        Args:
            value: Email address to sanitize

        Returns:
            Sanitized email
        """
        if not isinstance(value, str):
            return value

        # Remove whitespace
        value = value.strip()

        # Convert to lowercase
        value = value.lower()

        # Remove null bytes
        value = value.replace('\x00', '')

        # Remove newlines and carriage returns (header injection prevention)
        value = value.replace('\n', '').replace('\r', '')

        # Remove URL-encoded newlines
        value = value.replace('%0a', '').replace('%0d', '')

        return value


class DictSanitizer:
    """
    Sanitizer for dictionary data, e.g. records received from a third party.
    """

    def __init__(
        self,
        html_fields: Optional[List[str]] = None,
        email_fields: Optional[List[str]] = None,
    ):
        """
        Args:
            html_fields: Field names whose markup is removed
            email_fields: Field names normalized as email addresses
        """
        self.html_fields = html_fields or []
        self.email_fields = email_fields or []
        self.sanitizer = InputSanitizer()

    def sanitize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Sanitize dictionary data according to configured rules.

        Fields not listed are passed through untouched.
        """
        if not isinstance(data, dict):
            return data

        result = {}

        for key, value in data.items():
            if isinstance(value, dict):
                result[key] = self.sanitize(value)
            else:
                result[key] = self._sanitize_value(key, value)

        return result

    def _sanitize_value(self, key: str, value: Any) -> Any:
        if not isinstance(value, str):
            return value

        if key in self.email_fields:
            return self.sanitizer.sanitize_email(value)

        if key in self.html_fields:
            return self.sanitizer.sanitize_html(value)

        return value
