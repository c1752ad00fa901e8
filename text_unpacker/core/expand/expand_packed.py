from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from text_unpacker.core.model import RepeatGroup
from text_unpacker.core.validate.validate_packed import (
    CLOSE_BRACKET,
    DIGITS,
    OPEN_BRACKET,
    validate_packed,
)

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """A body being expanded; its result goes ``count`` times into the parent frame."""

    text: str
    count: int = 1
    position: int = 0
    out: list[str] = field(default_factory=list)


def expand_packed(text: str) -> str:
    """Return the fully expanded form of a valid packed text.

    ``a3[bc]4[d]e`` -> ``abcbcbcdddde``. Nested groups are expanded
    depth-first: a group body is fully expanded before it is repeated.
    Bodies are kept on an explicit stack, so nesting depth is not bound by
    the interpreter's recursion limit.

    Precondition: ``text`` passed ``validate_packed``. Nothing is
    re-validated here. Malformed input may raise ``IndexError`` or
    ``ValueError``, or return meaningless output.

    Output size is not capped and can grow exponentially with nesting
    (``9[9[9[9[a]]]]``); callers expanding untrusted text should bound the
    input themselves. A count with more digits than the interpreter's
    integer conversion limit (``sys.get_int_max_str_digits()``, 4300 by
    default) raises ``ValueError`` although the grammar accepts it.
    """

    stack: list[_Frame] = [_Frame(text)]
    while True:
        frame = stack[-1]
        if frame.position >= len(frame.text):
            stack.pop()
            expanded = "".join(frame.out)
            if not stack:
                return expanded
            stack[-1].out.append(expanded * frame.count)
            continue

        if frame.text[frame.position] in DIGITS:
            group = extract_repeat_group(frame.text, frame.position)
            frame.position += group.consumed_length
            if group.has_nested_group:
                stack.append(_Frame(group.body, count=group.count))
            else:
                frame.out.append(group.body * group.count)
        else:
            frame.out.append(frame.text[frame.position])
            frame.position += 1


def extract_repeat_group(text: str, start: int) -> RepeatGroup:
    """Build the repeat group whose count begins at ``start``."""
    end = start
    while text[end] in DIGITS:
        end += 1
    # A leading "0" is legal and means zero repetitions.
    count = int(text[start:end])

    # Skip the opening bracket; it sets the depth to 1.
    position = end + 1
    depth = 1
    nested = False
    body: list[str] = []
    while True:
        ch = text[position]
        position += 1
        if ch == OPEN_BRACKET:
            depth += 1
            nested = True
        elif ch == CLOSE_BRACKET:
            depth -= 1
            if depth == 0:
                break
        body.append(ch)

    group = RepeatGroup(
        count=count,
        body="".join(body),
        has_nested_group=nested,
        consumed_length=position - start,
    )
    logger.debug("repeat group at %d: count=%d nested=%s", start, group.count, group.has_nested_group)
    return group


def unpack(text: Optional[str], *, source: Optional[str] = None) -> str:
    """Validate then expand; raise the validation error when text is malformed."""
    result = validate_packed(text, source=source)
    if not result.is_valid:
        assert result.error is not None
        raise result.error
    assert text is not None
    return expand_packed(text)
