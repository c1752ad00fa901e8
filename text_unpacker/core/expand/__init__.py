"""Recursive expansion engine.

Expansion assumes its input already passed validation; see
``text_unpacker.core.validate.validate_packed``.
"""
