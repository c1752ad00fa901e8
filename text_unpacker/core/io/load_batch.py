from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from text_unpacker.core.errors import PackLoadError


def load_batch(path: str) -> list[str]:
    """Load a YAML/JSON batch of packed texts.

    The document is either a list of strings or a mapping with an ``inputs``
    list. Entries are returned verbatim; the validator owns grammar checks.
    """

    p = Path(path)
    if not p.exists():
        raise PackLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            source=str(p),
        )

    suffix = p.suffix.lower()
    try:
        raw_text = p.read_text(encoding="utf-8")
    except Exception as e:  # pragma: no cover
        raise PackLoadError(code="E_FILE_READ", message=str(e), source=str(p)) from e

    try:
        if suffix in {".yaml", ".yml"}:
            data = yaml.safe_load(raw_text)
        elif suffix == ".json":
            data = json.loads(raw_text)
        else:
            raise PackLoadError(
                code="E_UNSUPPORTED_FORMAT",
                message="supported formats are .yaml/.yml and .json",
                source=str(p),
            )
    except PackLoadError:
        raise
    except Exception as e:
        code = "E_YAML_PARSE" if suffix in {".yaml", ".yml"} else "E_JSON_PARSE"
        raise PackLoadError(code=code, message=str(e), source=str(p)) from e

    entries: Any = data.get("inputs") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise PackLoadError(
            code="E_INVALID_TOP_LEVEL",
            message="document must be a list of strings or a mapping with an 'inputs' list",
            source=str(p),
        )

    out: list[str] = []
    for i, item in enumerate(entries):
        if not isinstance(item, str):
            raise PackLoadError(
                code="E_INVALID_ENTRY",
                message=f"entry must be a string, got {type(item).__name__}",
                source=str(p),
                position=i,
            )
        out.append(item)
    return out
