# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Domain models for collected diagnostic codes."""

import re
from dataclasses import dataclass, fields
from typing import Any

RECORD_FIELDS: tuple[str, ...] = (
    "id",
    "category",
    "name",
    "message",
    "doc_url",
    "error_url",
    "resolved_url",
)


@dataclass(frozen=True)
class DiagnosticRecord:
    """Represent one normalized diagnostic code.

    Attributes:
        id: Diagnostic identifier, ``<Prefix><digits>``.
        category: Category label derived from the numeric suffix or stated
            explicitly by the source.
        name: Symbolic name associated with the code.
        message: Human-readable diagnostic message.
        doc_url: Machine-readable documentation URL (raw markdown).
        error_url: Documentation URL as it appears in the tool's error output.
        resolved_url: Canonical long-form URL behind ``error_url``.
    """

    id: str
    category: str | None = None
    name: str | None = None
    message: str | None = None
    doc_url: str | None = None
    error_url: str | None = None
    resolved_url: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Diagnostic record id must not be empty.")


@dataclass(frozen=True)
class FamilyDescriptor:
    """Describe one diagnostic family.

    Attributes:
        prefix: Identifier namespace, e.g. ``SYSLIB``.
        repo: Repository the family originates from.
        description: Human description of the family.
        pattern: Regular expression matching a full identifier.
    """

    prefix: str
    repo: str
    description: str
    pattern: str

    def matches(self, diagnostic_id: str) -> bool:
        """Check whether an identifier belongs to this family."""
        return re.fullmatch(self.pattern, diagnostic_id) is not None


@dataclass(frozen=True)
class Family:
    """Represent the assembled output unit for one family."""

    descriptor: FamilyDescriptor
    records: tuple[DiagnosticRecord, ...]

    @property
    def prefix(self) -> str:
        return self.descriptor.prefix

    @property
    def count(self) -> int:
        return len(self.records)


def to_payload(record: DiagnosticRecord) -> dict[str, Any]:
    """Serialize a record into a sparse mapping.

    Args:
        record: Record to serialize.

    Returns:
        Mapping with absent fields omitted, in ``RECORD_FIELDS`` order.
    """
    values = {field.name: getattr(record, field.name) for field in fields(record)}
    return {name: values[name] for name in RECORD_FIELDS if values[name] is not None}
