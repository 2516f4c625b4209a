"""UUID format checks for node, edge and workflow identifiers."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)

UUID_LENGTH = 36
HYPHEN_INDEXES = (8, 13, 18, 23)
VERSION_INDEX = 14
VARIANT_INDEX = 19
VARIANT_CHARS = "89ab"

EXPECTED_FORMAT = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"
EXAMPLE_UUID = "550e8400-e29b-41d4-a716-446655440000"

_UPPERCASE_HEX = re.compile(r"[A-F]")
_NOT_HEX_OR_HYPHEN = re.compile(r"[^0-9a-fA-F-]")


class UUIDValidation(BaseModel):
    """Every problem found in a candidate UUID."""

    is_valid: bool = Field(..., alias="isValid")
    issues: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    format: str
    expected_format: str = Field(EXPECTED_FORMAT, alias="expectedFormat")
    example: str = EXAMPLE_UUID

    model_config = ConfigDict(populate_by_name=True)


def is_valid_uuid(value: str) -> bool:
    """Strict check: lowercase, hyphenated, version 4, RFC variant."""
    return isinstance(value, str) and UUID_V4_PATTERN.fullmatch(value) is not None


def validate_uuid_format(value: str) -> UUIDValidation:
    """Check a string against the v4 UUID layout and report all violations.

    Each rule is checked on its own so one call lists every problem:
    length, hyphen positions, letter case, character set, version digit
    and variant digit. Positions in messages are 1-indexed.
    """
    issues: list[str] = []
    suggestions: list[str] = []

    if len(value) != UUID_LENGTH:
        issues.append(
            f"UUID length is {len(value)}, should be exactly {UUID_LENGTH} characters"
        )
        if len(value) < UUID_LENGTH:
            suggestions.append("UUID appears to be missing characters")
        else:
            suggestions.append("UUID appears to have extra characters")

    for index, char in enumerate(value):
        if index in HYPHEN_INDEXES:
            if char != "-":
                issues.append(f"Missing hyphen at position {index + 1}")
        elif char == "-":
            issues.append(f"Unexpected hyphen at position {index + 1}")

    if _UPPERCASE_HEX.search(value):
        issues.append("UUID contains uppercase letters - should be lowercase")
        suggestions.append("Convert all letters to lowercase (a-f)")

    invalid_chars = _NOT_HEX_OR_HYPHEN.findall(value)
    if invalid_chars:
        issues.append(f"UUID contains invalid characters: {', '.join(invalid_chars)}")
        suggestions.append("Use only hexadecimal characters (0-9, a-f) and hyphens")

    if len(value) > VERSION_INDEX:
        version = value[VERSION_INDEX]
        if version != "4":
            issues.append(
                f"Invalid version digit '{version}' at position {VERSION_INDEX + 1} - must be 4"
            )
            suggestions.append("The 13th hex digit must be 4 (UUID version 4)")

    if len(value) > VARIANT_INDEX:
        variant = value[VARIANT_INDEX]
        if variant not in VARIANT_CHARS:
            issues.append(
                f"Invalid variant digit '{variant}' at position {VARIANT_INDEX + 1} "
                "- must be 8, 9, a, or b"
            )

    return UUIDValidation(
        is_valid=not issues,
        issues=issues,
        suggestions=suggestions,
        format=value,
    )
