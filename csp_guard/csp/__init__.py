"""CSP directive merging and header building."""

from csp_guard.csp.baseline import baseline_directives
from csp_guard.csp.builder import build_csp_header, build_directives, serialize_directives
from csp_guard.csp.merger import DirectiveTable, merge_rules, propagate_granular
from csp_guard.csp.values import normalize_value, resolve_none

__all__ = [
    "DirectiveTable",
    "baseline_directives",
    "build_csp_header",
    "build_directives",
    "merge_rules",
    "normalize_value",
    "propagate_granular",
    "resolve_none",
    "serialize_directives",
]
