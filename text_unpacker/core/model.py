from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from text_unpacker.core.errors import PackValidationError


ErrorCode = Literal[
    "E_EMPTY_INPUT",
    "E_ILLEGAL_LEADING_CHARACTER",
    "E_UNSUPPORTED_CHARACTER",
    "E_BRACKET_IMBALANCE",
    "E_ILLEGAL_ADJACENCY",
]

CharClass = Literal["digit", "letter", "open", "close"]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    message: Optional[str] = None
    error: Optional[PackValidationError] = None


@dataclass(frozen=True)
class RepeatGroup:
    count: int
    body: str
    has_nested_group: bool
    consumed_length: int  # first digit through the matching "]"


@dataclass(frozen=True)
class PackSummary:
    group_count: int
    max_depth: int
    input_length: int
