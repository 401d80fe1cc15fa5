"""Pydantic models for CSP rules and header options."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Literal, Union

import structlog
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = structlog.get_logger()

SourceList = Union[str, list[str]]
BooleanFlag = Union[bool, Literal[""]]

# Directives that take no source list
BOOLEAN_DIRECTIVES = frozenset({
    "upgrade-insecure-requests",
    "block-all-mixed-content",
})

# Rule fields that document a rule but never reach the header
METADATA_FIELDS = frozenset({"description", "source"})


class CspRule(BaseModel):
    """A single caller-supplied CSP rule.

    Fields are addressed by their CSP directive names::

        CspRule.model_validate({
            "description": "google-auth",
            "form-action": "'self' https://accounts.google.com",
            "img-src": ["https://*.googleusercontent.com"],
        })

    Unknown keys are ignored; a value of the wrong type is dropped with a
    ``csp_rule_field_ignored`` warning.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    description: str | None = None
    source: str | None = None

    # Fetch directives
    base_uri: SourceList | None = Field(default=None, alias="base-uri")
    child_src: SourceList | None = Field(default=None, alias="child-src")
    connect_src: SourceList | None = Field(default=None, alias="connect-src")
    default_src: SourceList | None = Field(default=None, alias="default-src")
    font_src: SourceList | None = Field(default=None, alias="font-src")
    form_action: SourceList | None = Field(default=None, alias="form-action")
    frame_ancestors: SourceList | None = Field(default=None, alias="frame-ancestors")
    frame_src: SourceList | None = Field(default=None, alias="frame-src")
    img_src: SourceList | None = Field(default=None, alias="img-src")
    manifest_src: SourceList | None = Field(default=None, alias="manifest-src")
    media_src: SourceList | None = Field(default=None, alias="media-src")
    object_src: SourceList | None = Field(default=None, alias="object-src")
    script_src: SourceList | None = Field(default=None, alias="script-src")
    script_src_attr: SourceList | None = Field(default=None, alias="script-src-attr")
    script_src_elem: SourceList | None = Field(default=None, alias="script-src-elem")
    style_src: SourceList | None = Field(default=None, alias="style-src")
    style_src_attr: SourceList | None = Field(default=None, alias="style-src-attr")
    style_src_elem: SourceList | None = Field(default=None, alias="style-src-elem")
    worker_src: SourceList | None = Field(default=None, alias="worker-src")

    # Document and navigation directives
    sandbox: SourceList | None = None
    navigate_to: SourceList | None = Field(default=None, alias="navigate-to")

    # Reporting directives (report-uri is deprecated but still widely used)
    report_to: str | None = Field(default=None, alias="report-to")
    report_uri: str | None = Field(default=None, alias="report-uri")

    # Trusted Types
    require_trusted_types_for: str | None = Field(default=None, alias="require-trusted-types-for")
    trusted_types: SourceList | None = Field(default=None, alias="trusted-types")

    # Boolean directives: True or "" enables, False omits
    upgrade_insecure_requests: BooleanFlag | None = Field(default=None, alias="upgrade-insecure-requests")
    block_all_mixed_content: BooleanFlag | None = Field(default=None, alias="block-all-mixed-content")

    @field_validator("*", mode="wrap")
    @classmethod
    def _ignore_mistyped(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        """Drop a field whose value has the wrong type instead of failing the rule."""
        try:
            return handler(value)
        except ValidationError:
            field = cls.model_fields[info.field_name]
            logger.warning(
                "csp_rule_field_ignored",
                field=field.alias or info.field_name,
                value_type=type(value).__name__,
            )
            return None

    def directives(self) -> Iterator[tuple[str, Any]]:
        """Yield (directive, raw value) for each directive set on this rule."""
        fields_set = self.model_fields_set
        for name, info in type(self).model_fields.items():
            if name in METADATA_FIELDS or name not in fields_set:
                continue
            value = getattr(self, name)
            if value is None:
                continue
            yield info.alias or name, value


def coerce_rules(rules: Iterable[CspRule | Mapping[str, Any]] | None) -> list[CspRule]:
    """Validate mappings into CspRule instances, passing CspRule through.

    Entries that are neither are skipped with a warning.
    """
    if not rules:
        return []
    result = []
    for index, rule in enumerate(rules):
        if isinstance(rule, CspRule):
            result.append(rule)
        elif isinstance(rule, Mapping):
            result.append(CspRule.model_validate(rule))
        else:
            logger.warning("csp_rule_ignored", index=index, value_type=type(rule).__name__)
    return result


class SecurityOptions(BaseModel):
    """Per-call options for security header generation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_dev: bool | None = None
    nonce: str | None = None
    header_config: dict[str, str] = Field(default_factory=dict)
