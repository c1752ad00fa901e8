"""Validate and expand run-length packed text such as ``a3[bc]4[d]e``."""
from __future__ import annotations

from text_unpacker.core.errors import PackError, PackLoadError, PackValidationError
from text_unpacker.core.expand.expand_packed import expand_packed, unpack
from text_unpacker.core.model import RepeatGroup, ValidationResult
from text_unpacker.core.validate.validate_packed import summarize_packed, validate_packed

validate = validate_packed
expand = expand_packed

__all__ = [
    "PackError",
    "PackLoadError",
    "PackValidationError",
    "RepeatGroup",
    "ValidationResult",
    "expand",
    "expand_packed",
    "summarize_packed",
    "unpack",
    "validate",
    "validate_packed",
]
