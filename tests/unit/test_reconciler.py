# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Unit tests for reconciliation of partial observations."""

import pytest

from dcc.model import DiagnosticRecord
from dcc.reconciler import (
    SourceObservations,
    dedupe_first,
    merge_records,
    reconcile,
    sort_records,
)


def _source(
    label: str, *records: DiagnosticRecord, role: str = "merge"
) -> SourceObservations:
    return SourceObservations(
        label=label,
        role=role,  # type: ignore[arg-type]
        records={record.id: record for record in records},
    )


def test_rec_001_first_wins_fields_keep_earliest_value() -> None:
    existing = DiagnosticRecord(id="X0001", category="Obsoletion", name="First")
    incoming = DiagnosticRecord(
        id="X0001",
        category="Analyzer",
        name="Second",
        doc_url="https://example.com/x0001.md",
    )

    merged = merge_records(existing, incoming)

    assert merged.category == "Obsoletion"
    assert merged.name == "First"
    assert merged.doc_url == "https://example.com/x0001.md"


def test_rec_002_message_replaced_only_by_strictly_longer_text() -> None:
    existing = DiagnosticRecord(id="X0001", message="foo")

    assert merge_records(existing, DiagnosticRecord(id="X0001", message="foobar")).message == (
        "foobar"
    )
    assert merge_records(existing, DiagnosticRecord(id="X0001", message="bar")).message == "foo"
    assert merge_records(existing, DiagnosticRecord(id="X0001", message="f")).message == "foo"


def test_rec_003_missing_message_is_filled_from_incoming() -> None:
    existing = DiagnosticRecord(id="X0001", name="Thing")

    merged = merge_records(existing, DiagnosticRecord(id="X0001", message="Hello"))

    assert merged == DiagnosticRecord(id="X0001", name="Thing", message="Hello")


def test_rec_004_merge_without_changes_returns_existing_instance() -> None:
    existing = DiagnosticRecord(id="X0001", name="Thing", message="Hello world")

    assert merge_records(existing, DiagnosticRecord(id="X0001", message="Hi")) is existing


def test_rec_005_merge_rejects_different_identifiers() -> None:
    with pytest.raises(ValueError, match="different ids"):
        merge_records(DiagnosticRecord(id="X0001"), DiagnosticRecord(id="X0002"))


def test_rec_006_merge_is_idempotent() -> None:
    record = DiagnosticRecord(id="X0001", category="A", name="N", message="M")

    assert merge_records(record, record) == record


def test_rec_007_dedupe_keeps_first_observation_without_field_merge() -> None:
    records = [
        DiagnosticRecord(id="X0002", message="first"),
        DiagnosticRecord(id="X0001"),
        DiagnosticRecord(id="X0002", message="second and longer", name="Late"),
    ]

    kept = dedupe_first(records)

    assert list(kept) == ["X0002", "X0001"]
    assert kept["X0002"] == DiagnosticRecord(id="X0002", message="first")


def test_rec_008_reconcile_merges_sources_in_order_and_sorts() -> None:
    markdown = _source(
        "list-of-diagnostics.md",
        DiagnosticRecord(id="X0002", category="Obsoletion", message="foo"),
        DiagnosticRecord(id="X0001", category="Obsoletion", message="short"),
    )
    constants = _source(
        "Obsoletions.cs",
        DiagnosticRecord(id="X0002", name="Thing", message="foobar"),
        DiagnosticRecord(id="X0003", name="Extra"),
    )

    records = reconcile([markdown, constants])

    assert [record.id for record in records] == ["X0001", "X0002", "X0003"]
    assert records[1] == DiagnosticRecord(
        id="X0002", category="Obsoletion", name="Thing", message="foobar"
    )
    assert records[2] == DiagnosticRecord(id="X0003", name="Extra")


def test_rec_009_backfill_source_adds_only_unseen_identifiers() -> None:
    primary = _source("EFDiagnostics.cs", DiagnosticRecord(id="EF1001", name="Primary"))
    release_notes = _source(
        "AnalyzerReleases.Shipped.md",
        DiagnosticRecord(id="EF1001", name="Other", message="would be longer"),
        DiagnosticRecord(id="EF1002", name="Backfilled"),
        role="backfill",
    )

    records = reconcile([primary, release_notes])

    assert records == [
        DiagnosticRecord(id="EF1001", name="Primary"),
        DiagnosticRecord(id="EF1002", name="Backfilled"),
    ]


def test_rec_010_reconcile_of_no_sources_is_empty() -> None:
    assert reconcile([]) == []
    assert reconcile([_source("empty")]) == []


def test_rec_011_sort_records_is_ascending_by_identifier() -> None:
    records = [DiagnosticRecord(id=value) for value in ("B0002", "A0009", "B0001")]

    assert [record.id for record in sort_records(records)] == ["A0009", "B0001", "B0002"]


def test_rec_012_reconcile_is_repeatable_and_stable_on_its_own_output() -> None:
    sources = [
        _source(
            "list-of-diagnostics.md",
            DiagnosticRecord(id="X0002", category="Obsoletion", message="foo"),
            DiagnosticRecord(id="X0001", message="short"),
        ),
        _source(
            "Obsoletions.cs",
            DiagnosticRecord(id="X0002", name="Thing", message="foobar"),
            DiagnosticRecord(id="X0001", name="Other", message="s"),
        ),
        _source("release notes", DiagnosticRecord(id="X0003"), role="backfill"),
    ]

    first = reconcile(sources)
    second = reconcile(sources)
    again = reconcile([_source("reconciled", *first), _source("reconciled", *first)])

    assert first == second
    assert again == first
