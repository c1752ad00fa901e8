from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml


DEFAULT_PROMPT = "Enter the text to unpack and press ENTER:"
OUTPUT_FORMATS: tuple[str, ...] = ("text", "json")


@dataclass(frozen=True)
class UnpackSettings:
    prompt: str = DEFAULT_PROMPT
    format: str = "text"
    # The repl stops on this line when set; EOF always stops it.
    quit_word: Optional[str] = None


class SettingsError(ValueError):
    pass


def load_settings_file(path: str | Path) -> dict[str, Any]:
    """Load setting overrides from a YAML file.

    Format:
      prompt: "unpack> "
      format: text|json
      quit_word: quit

    Returns only the keys present in the file.
    """
    p = Path(path)
    raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SettingsError("settings file must be a mapping of name -> value")

    known = {f.name for f in fields(UnpackSettings)}
    out: dict[str, Any] = {}
    for k, v in raw.items():
        if k not in known:
            raise SettingsError(f"unknown setting '{k}' (choose from: {', '.join(sorted(known))})")
        if k == "quit_word" and v is None:
            out[k] = None
            continue
        if not isinstance(v, str) or not v.strip():
            raise SettingsError(f"setting '{k}' must be a non-empty string")
        if k == "format" and v not in OUTPUT_FORMATS:
            raise SettingsError(f"setting 'format' must be one of: {', '.join(OUTPUT_FORMATS)}")
        out[k] = v
    return out


def merged_settings(overrides: dict[str, Any] | None = None) -> UnpackSettings:
    """Return the default settings with optional overrides applied."""
    if not overrides:
        return UnpackSettings()
    return replace(UnpackSettings(), **overrides)


def load_and_merge(settings_file: str | None) -> UnpackSettings:
    if not settings_file:
        return merged_settings()
    return merged_settings(load_settings_file(settings_file))
