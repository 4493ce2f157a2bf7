"""Input validation helpers with XSS protection"""

import re
from typing import Optional, Tuple

import bleach

from app.utils.exceptions import ValidationFailed

# Allowed HTML tags for user input
ALLOWED_TAGS = frozenset(['b', 'i', 'u', 'em', 'strong', 'p', 'br'])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


class SafeStringMixin:
    """Mixin for XSS-safe string validation"""

    @staticmethod
    def sanitize_html(value: Optional[str]) -> Optional[str]:
        """Remove dangerous HTML/JavaScript"""
        if not value:
            return value
        return bleach.clean(value, tags=ALLOWED_TAGS, strip=True)

    @staticmethod
    def validate_no_script(value: Optional[str]) -> Optional[str]:
        """Block common XSS patterns"""
        if not value:
            return value

        dangerous_patterns = [
            r'<script[^>]*>',
            r'javascript:',
            r'on\w+\s*=',
            r'<iframe',
        ]

        for pattern in dangerous_patterns:
            if re.search(pattern, value, re.IGNORECASE):
                raise ValueError("Invalid characters detected")

        return value


# Utility validation functions
def validate_pagination(page: int, limit: int) -> Tuple[int, int]:
    """Reject pages below 1 and limits outside 1-100"""
    if page < 1:
        raise ValidationFailed("Page number must be at least 1")
    if limit < 1 or limit > MAX_LIMIT:
        raise ValidationFailed(f"Limit must be between 1 and {MAX_LIMIT}")
    return page, limit


def validate_movie_id(movie_id: int) -> int:
    if movie_id < 1:
        raise ValidationFailed("Movie ID must be a positive integer")
    return movie_id
