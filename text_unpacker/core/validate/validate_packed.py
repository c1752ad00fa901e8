from __future__ import annotations

import logging
import string
from typing import Optional

from text_unpacker.core.errors import PackValidationError
from text_unpacker.core.model import CharClass, ErrorCode, PackSummary, ValidationResult

logger = logging.getLogger(__name__)


OPEN_BRACKET = "["
CLOSE_BRACKET = "]"

DIGITS: frozenset[str] = frozenset(string.digits)
LETTERS: frozenset[str] = frozenset(string.ascii_letters)
ALLOWED_CHARACTERS: frozenset[str] = DIGITS | LETTERS | {OPEN_BRACKET, CLOSE_BRACKET}

MESSAGES: dict[ErrorCode, str] = {
    "E_EMPTY_INPUT": "must contain non-whitespace characters",
    "E_ILLEGAL_LEADING_CHARACTER": "first character must be a letter or digit",
    "E_UNSUPPORTED_CHARACTER": "unsupported character",
    "E_BRACKET_IMBALANCE": "invalid bracket positioning",
    "E_ILLEGAL_ADJACENCY": "invalid character positioning",
}

# Which character classes may directly follow each class.
CAN_FOLLOW: dict[CharClass, frozenset[CharClass]] = {
    "digit": frozenset({"digit", "open"}),
    "letter": frozenset({"digit", "letter", "close"}),
    "open": frozenset({"digit", "letter"}),
    "close": frozenset({"digit", "letter", "close"}),
}


def char_class(ch: str) -> CharClass:
    """Classify a character that already passed the character set check."""
    if ch in DIGITS:
        return "digit"
    if ch in LETTERS:
        return "letter"
    if ch == OPEN_BRACKET:
        return "open"
    return "close"


def validate_packed(text: Optional[str], *, source: Optional[str] = None) -> ValidationResult:
    """Check that text is well formed for unpacking.

    Checks run in a fixed order and the first failure wins:
    empty input, leading bracket, character set, bracket balance, adjacency.
    Never raises; the failure is carried in the returned result.
    """

    if text is None or not text.strip():
        return _invalid("E_EMPTY_INPUT", source, None)

    if text[0] in (OPEN_BRACKET, CLOSE_BRACKET):
        return _invalid("E_ILLEGAL_LEADING_CHARACTER", source, 0)

    bad = _first_unsupported(text)
    if bad is not None:
        return _invalid("E_UNSUPPORTED_CHARACTER", source, bad)

    bad = _first_bracket_imbalance(text)
    if bad is not None:
        return _invalid("E_BRACKET_IMBALANCE", source, bad)

    bad = _first_bad_adjacency(text)
    if bad is not None:
        return _invalid("E_ILLEGAL_ADJACENCY", source, bad)

    return ValidationResult(is_valid=True)


def summarize_packed(text: str) -> PackSummary:
    """Count repeat groups and the deepest nesting of a valid text."""
    depth = 0
    max_depth = 0
    groups = 0
    for ch in text:
        if ch == OPEN_BRACKET:
            groups += 1
            depth += 1
            max_depth = max(max_depth, depth)
        elif ch == CLOSE_BRACKET:
            depth -= 1
    return PackSummary(group_count=groups, max_depth=max_depth, input_length=len(text))


def _first_unsupported(text: str) -> Optional[int]:
    for i, ch in enumerate(text):
        if ch not in ALLOWED_CHARACTERS:
            return i
    return None


def _first_bracket_imbalance(text: str) -> Optional[int]:
    balance = 0
    for i, ch in enumerate(text):
        if ch == OPEN_BRACKET:
            balance += 1
        elif ch == CLOSE_BRACKET:
            if balance == 0:
                # Closing without opening first.
                return i
            balance -= 1
    if balance != 0:
        return len(text)
    return None


def _first_bad_adjacency(text: str) -> Optional[int]:
    classes = [char_class(ch) for ch in text]
    for i in range(len(classes) - 1):
        if classes[i + 1] not in CAN_FOLLOW[classes[i]]:
            return i + 1

    # A trailing open bracket is already caught by the balance check.
    if classes[-1] == "digit":
        return len(text) - 1
    return None


def _invalid(code: ErrorCode, source: Optional[str], position: Optional[int]) -> ValidationResult:
    err = PackValidationError(code=code, message=MESSAGES[code], source=source, position=position)
    logger.debug("packed text rejected: %s", err)
    return ValidationResult(is_valid=False, message=err.message, error=err)
