from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PackError(Exception):
    """Base error envelope. Prefer returning/printing these rather than raising raw exceptions."""

    code: str
    message: str
    source: Optional[str] = None
    position: Optional[int] = None

    def __str__(self) -> str:
        parts: list[str] = [self.source or "<input>"]
        if self.position is not None:
            parts.append(str(self.position))
        loc = ":".join(parts)
        return f"{loc}: {self.code}: {self.message}"


class PackLoadError(PackError):
    pass


class PackValidationError(PackError):
    pass
