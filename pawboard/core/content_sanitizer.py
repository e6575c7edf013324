from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_ZERO_WIDTH_PATTERN = re.compile("[\u200b-\u200d\u2060\ufeff]")
_INLINE_WHITESPACE_PATTERN = re.compile(r"[ \t]+")
_BLANK_LINES_PATTERN = re.compile(r"\n{3,}")


class ContentValidationError(ValueError):
    """Raised when submitted content has nothing left to score after cleaning."""

    error_code: str = "invalid_content"


def sanitize_content(content: str) -> str:
    """Strip control and zero-width characters and normalise whitespace.

    Paragraph breaks are kept since the quality scorer reads sentence structure.
    """
    sanitized = content.replace("\r\n", "\n").replace("\r", "\n")
    sanitized = _CONTROL_CHARS_PATTERN.sub(" ", sanitized)
    sanitized = _ZERO_WIDTH_PATTERN.sub("", sanitized)
    sanitized = _INLINE_WHITESPACE_PATTERN.sub(" ", sanitized)
    sanitized = "\n".join(line.strip() for line in sanitized.split("\n"))
    sanitized = _BLANK_LINES_PATTERN.sub("\n\n", sanitized).strip()

    if not sanitized:
        raise ContentValidationError("Content must include text after sanitization.")

    if sanitized != content:
        logger.debug(
            "Sanitized content input",
            extra={"original_length": len(content), "sanitized_length": len(sanitized)},
        )

    return sanitized
