# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Reconciliation of partial diagnostic observations into final records."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Literal

from dcc.categorizer import id_sort_key
from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)

SourceRole = Literal["merge", "backfill"]


@dataclass(frozen=True)
class SourceObservations:
    """Represent the deduplicated output of one extraction pass.

    Attributes:
        label: Short name of the pass, used in logs.
        role: ``merge`` sources add new identifiers and merge fields into
            existing ones; ``backfill`` sources only add identifiers nobody
            observed before them.
        records: Partial records keyed by identifier, in observation order.
    """

    label: str
    role: SourceRole
    records: Mapping[str, DiagnosticRecord]


def merge_records(
    existing: DiagnosticRecord, incoming: DiagnosticRecord
) -> DiagnosticRecord:
    """Merge one incoming observation into an existing record.

    ``name``, ``category``, ``doc_url``, ``error_url`` and ``resolved_url``
    are first-wins. ``message`` is replaced only when absent or when the
    incoming text is strictly longer.

    Args:
        existing: Record built from earlier observations.
        incoming: Later observation of the same identifier.

    Returns:
        The merged record; ``existing`` itself when nothing changed.

    Raises:
        ValueError: If the identifiers differ.
    """
    if existing.id != incoming.id:
        raise ValueError(
            f"Cannot merge records with different ids: {existing.id} != {incoming.id}"
        )
    message = existing.message
    if incoming.message is not None and (
        message is None or len(incoming.message) > len(message)
    ):
        message = incoming.message
    merged = replace(
        existing,
        category=existing.category if existing.category is not None else incoming.category,
        name=existing.name if existing.name is not None else incoming.name,
        message=message,
        doc_url=existing.doc_url if existing.doc_url is not None else incoming.doc_url,
        error_url=(
            existing.error_url if existing.error_url is not None else incoming.error_url
        ),
        resolved_url=(
            existing.resolved_url
            if existing.resolved_url is not None
            else incoming.resolved_url
        ),
    )
    return existing if merged == existing else merged


def dedupe_first(records: Iterable[DiagnosticRecord]) -> dict[str, DiagnosticRecord]:
    """Keep the first observation of each identifier and drop the rest.

    Used within a single pass over several files; no field-level merge.
    """
    kept: dict[str, DiagnosticRecord] = {}
    dropped = 0
    for record in records:
        if record.id in kept:
            dropped += 1
            continue
        kept[record.id] = record
    if dropped:
        logger.debug(f"Dropped duplicate observations (kept={len(kept)} dropped={dropped})")
    return kept


def reconcile(sources: Sequence[SourceObservations]) -> list[DiagnosticRecord]:
    """Reconcile ordered pass outputs into one sorted record list.

    Args:
        sources: Pass outputs in their documented processing order. The
            order matters because first-wins fields keep the earliest value.

    Returns:
        Deduplicated records sorted ascending by identifier.
    """
    merged: dict[str, DiagnosticRecord] = {}
    for source in sources:
        added = 0
        updated = 0
        for diagnostic_id, incoming in source.records.items():
            current = merged.get(diagnostic_id)
            if current is None:
                merged[diagnostic_id] = incoming
                added += 1
                continue
            if source.role == "backfill":
                continue
            result = merge_records(current, incoming)
            if result is not current:
                merged[diagnostic_id] = result
                updated += 1
        logger.info(
            f"Reconciled source (source={source.label} role={source.role} "
            f"observed={len(source.records)} added={added} updated={updated})"
        )
    return sort_records(merged.values())


def sort_records(records: Iterable[DiagnosticRecord]) -> list[DiagnosticRecord]:
    """Stable-sort records by identifier."""
    return sorted(records, key=lambda record: id_sort_key(record.id))
