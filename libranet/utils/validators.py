import re
from typing import List, Optional

from libranet.exceptions import InvalidInputError

DEFAULT_AUTHOR = "Unknown"


class TextValidator:
    """Basic text validation and normalisation for catalogue and user input."""

    @staticmethod
    def _is_non_empty_alpha(text: Optional[str]) -> bool:
        if text is None:
            return False
        t = text.strip()
        if not t:
            return False
        # letters, digits and punctuation are fine; purely numeric is not
        return any(c.isalpha() for c in t)

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        # "1984" is a real title, so only require something non-blank
        return title is not None and bool(title.strip())

    @staticmethod
    def validate_name(name: Optional[str]) -> bool:
        return TextValidator._is_non_empty_alpha(name)

    @staticmethod
    def clean_title(title: Optional[str]) -> str:
        if not TextValidator.validate_title(title):
            raise InvalidInputError("Title must not be empty")
        return re.sub(r"\s+", " ", title.strip())

    @staticmethod
    def clean_name(name: Optional[str]) -> str:
        if not TextValidator.validate_name(name):
            raise InvalidInputError("User name must contain letters")
        return re.sub(r"\s+", " ", name.strip())

    @staticmethod
    def split_authors(raw: Optional[str]) -> List[str]:
        """Turn ``"Gamma, Helm ,Johnson"`` into ``["Gamma", "Helm", "Johnson"]``."""
        if raw is None:
            return [DEFAULT_AUTHOR]
        authors = [part.strip() for part in raw.split(",") if part.strip()]
        return authors or [DEFAULT_AUTHOR]


class IdValidator:

    @staticmethod
    def require_positive(value: int, label: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidInputError(f"{label} must be a positive integer")
        return value
