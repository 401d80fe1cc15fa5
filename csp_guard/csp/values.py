"""Token normalization and 'none' keyword resolution for CSP directive values."""

from __future__ import annotations

from typing import Any

NONE = "'none'"

# Marker token for a directive emitted without a value
BOOLEAN_SIGNAL = ""


def normalize_value(raw: Any) -> list[str]:
    """Turn a rule's raw directive value into a list of source tokens.

    - ``True`` or ``""`` -> ``[""]`` (valueless directive)
    - ``False`` or ``None`` -> ``[]`` (directive omitted)
    - ``"a  b"`` -> ``["a", "b"]``
    - ``[" a ", ""]`` -> ``["a"]``
    """
    if raw is None or raw is False:
        return []
    if raw is True or raw == BOOLEAN_SIGNAL:
        return [BOOLEAN_SIGNAL]
    if isinstance(raw, str):
        return raw.split()
    tokens = []
    for item in raw:
        item = str(item).strip()
        if item:
            tokens.append(item)
    return tokens


def resolve_none(tokens: list[str], accumulated: list[str]) -> tuple[list[str], list[str]]:
    """Apply the rule that ``'none'`` must be the only value of a directive.

    Returns ``(accumulated, tokens)``: the directive's tokens after any
    ``'none'`` stripping or reset, and the tokens still to be added. Matching
    is case-sensitive, so ``'None'`` is an ordinary token.
    """
    if len(tokens) > 1 and NONE in tokens:
        tokens = [t for t in tokens if t != NONE]

    if tokens == [NONE]:
        return [NONE], []

    if tokens and NONE in accumulated:
        accumulated = [t for t in accumulated if t != NONE]
    return list(accumulated), tokens
