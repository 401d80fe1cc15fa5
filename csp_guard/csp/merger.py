"""Merge caller CSP rules into a directive table."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from csp_guard.csp.values import BOOLEAN_SIGNAL, normalize_value, resolve_none
from csp_guard.models.csp_rule import BOOLEAN_DIRECTIVES, CspRule

logger = structlog.get_logger()

DirectiveTable = dict[str, list[str]]

DANGEROUS_IN_PROD = frozenset({"'unsafe-eval'"})
WILDCARD = "*"

# Directives that never get an implicit 'self' when first introduced by a rule
DIRECTIVES_WITHOUT_SELF = BOOLEAN_DIRECTIVES | frozenset({
    "report-uri",
    "report-to",
    "sandbox",
    "require-trusted-types-for",
    "trusted-types",
})

# (base, granular) pairs kept in sync for CSP Level 3 browsers
GRANULAR_PAIRS = (
    ("script-src", "script-src-elem"),
    ("style-src", "style-src-elem"),
)

# Tokens never copied into a given granular directive
_GRANULAR_EXCLUDED = {
    "script-src-elem": frozenset({"'unsafe-eval'"}),
}


def _validate_value(directive: str, value: str, is_dev: bool, description: str | None) -> None:
    """Log advisory warnings for weak CSP values. Never alters output."""
    if not is_dev and value in DANGEROUS_IN_PROD:
        logger.warning(
            "csp_unsafe_eval_in_production",
            directive=directive,
            value=value,
            rule=description,
        )
    if value == WILDCARD:
        logger.warning("csp_wildcard_source", directive=directive, rule=description)


def _add_unique(target: list[str], tokens: Iterable[str]) -> None:
    existing = set(target)
    for token in tokens:
        if token not in existing:
            target.append(token)
            existing.add(token)


def copy_table(table: DirectiveTable) -> DirectiveTable:
    return {directive: list(values) for directive, values in table.items()}


def merge_rules(
    baseline: DirectiveTable,
    rules: Iterable[CspRule],
    is_dev: bool = False,
) -> DirectiveTable:
    """Fold rules, in order, into a copy of ``baseline``.

    Tokens are deduplicated per directive. A rule whose only value for a
    directive is ``'none'`` resets that directive to ``'none'``; otherwise
    rules only ever add tokens. A directive missing from the baseline starts
    from ``'self'`` unless it is listed in ``DIRECTIVES_WITHOUT_SELF``.
    """
    merged = copy_table(baseline)

    for rule in rules:
        for directive, raw in rule.directives():
            tokens = normalize_value(raw)
            if not tokens:
                continue

            if directive not in merged:
                merged[directive] = [] if directive in DIRECTIVES_WITHOUT_SELF else ["'self'"]

            accumulated, tokens = resolve_none(tokens, merged[directive])
            for token in tokens:
                if token != BOOLEAN_SIGNAL:
                    _validate_value(directive, token, is_dev, rule.description)
            _add_unique(accumulated, tokens)
            merged[directive] = accumulated

    return merged


def propagate_granular(table: DirectiveTable) -> DirectiveTable:
    """Copy base directive sources into their ``-elem`` counterparts.

    CSP Level 3 browsers consult only the granular directive when it is
    present, so sources added to ``script-src``/``style-src`` must also
    appear there. ``'unsafe-eval'`` is not copied to ``script-src-elem``.
    """
    result = copy_table(table)
    for base, granular in GRANULAR_PAIRS:
        if base not in result or granular not in result:
            continue
        excluded = _GRANULAR_EXCLUDED.get(granular, frozenset())
        tokens = [t for t in result[base] if t not in excluded]
        if not tokens:
            continue
        accumulated, tokens = resolve_none(tokens, result[granular])
        _add_unique(accumulated, tokens)
        result[granular] = accumulated
    return result
