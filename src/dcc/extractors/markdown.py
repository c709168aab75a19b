# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Markdown extractors for diagnostic lists, headings and release notes."""

import logging
import re

from dcc.categorizer import RangeTable, categorize
from dcc.extractor import Artifact
from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)

_EMPHASIS_MARKERS: tuple[str, ...] = ("_", "*")


class MarkdownTableExtractor:
    """Extract identifiers and descriptions from emphasized-ID table rows.

    Rows look like ``| __`SYSLIB0001`__ | The UTF-7 encoding is insecure. |``.
    Rows whose description is empty or wholly wrapped in emphasis markers
    (for example ``_reserved_``) are placeholders and produce no record.
    """

    def __init__(self, id_pattern: str, categories: RangeTable | None = None) -> None:
        """Initialize extractor.

        Args:
            id_pattern: Unanchored regular expression matching one identifier.
            categories: Optional range table used to label each row.
        """
        self._categories = categories
        self._row_regex = re.compile(
            r"\|[ \t]*(?:__|\*\*)`?(" + id_pattern + r")`?(?:__|\*\*)[ \t]*\|([^|\n]*)\|",
        )

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        records: dict[str, DiagnosticRecord] = {}
        skipped = 0
        for match in self._row_regex.finditer(artifact.text):
            diagnostic_id = match.group(1)
            description = match.group(2).strip()
            if not description or is_placeholder(description):
                skipped += 1
                continue
            if diagnostic_id in records:
                continue
            records[diagnostic_id] = DiagnosticRecord(
                id=diagnostic_id,
                category=(
                    categorize(diagnostic_id, self._categories)
                    if self._categories is not None
                    else None
                ),
                message=description,
            )
        logger.debug(
            f"Parsed markdown table (file_path={artifact.path} "
            f"records={len(records)} placeholders={skipped})"
        )
        return records


def is_placeholder(description: str) -> bool:
    """Check whether a table cell is a reserved/unassigned placeholder.

    Args:
        description: Trimmed description cell.

    Returns:
        True when the whole text is wrapped in one kind of emphasis marker.
    """
    if len(description) < 2:
        return False
    return any(
        description.startswith(marker) and description.endswith(marker)
        for marker in _EMPHASIS_MARKERS
    )


class HeadingDescriptorExtractor:
    """Extract identifier/name pairs from headings or two-cell rows.

    Matches ``## BC0101 - ConflictingOutputPath`` headings and
    ``| BC0101 | ConflictingOutputPath |`` rows.
    """

    def __init__(self, id_pattern: str, category: str | None = None) -> None:
        self._category = category
        self._heading_regex = re.compile(
            r"^#+\s*`?(" + id_pattern + r")`?\s*[-:]\s*(.+?)\s*$", re.MULTILINE
        )
        self._row_regex = re.compile(
            r"^\|\s*`?(" + id_pattern + r")`?\s*\|\s*([^|]+?)\s*\|\s*$", re.MULTILINE
        )

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        matches = sorted(
            [
                *self._heading_regex.finditer(artifact.text),
                *self._row_regex.finditer(artifact.text),
            ],
            key=lambda match: match.start(),
        )
        records: dict[str, DiagnosticRecord] = {}
        for match in matches:
            diagnostic_id = match.group(1)
            name = match.group(2).strip()
            if diagnostic_id in records or not name:
                continue
            records[diagnostic_id] = DiagnosticRecord(
                id=diagnostic_id, category=self._category, name=name
            )
        return records


class ReleaseTableExtractor:
    """Extract analyzer release-note rows.

    Rows follow ``ID | Category | Severity | Name`` as in
    ``AnalyzerReleases.Shipped.md``; the notes column may be empty.
    """

    def __init__(
        self,
        id_pattern: str,
        take_category: bool = True,
        take_name: bool = True,
    ) -> None:
        """Initialize extractor.

        Args:
            id_pattern: Unanchored regular expression matching one identifier.
            take_category: Copy the category column into the record.
            take_name: Copy the leading word of the notes column as the name.
        """
        self._take_category = take_category
        self._take_name = take_name
        self._row_regex = re.compile(
            r"^\s*(" + id_pattern + r")\s*\|\s*(\w+)\s*\|\s*(\w+)\s*\|[ \t]*(\w*)",
            re.MULTILINE,
        )

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        records: dict[str, DiagnosticRecord] = {}
        for match in self._row_regex.finditer(artifact.text):
            diagnostic_id = match.group(1)
            if diagnostic_id in records:
                continue
            name = match.group(4) or None
            records[diagnostic_id] = DiagnosticRecord(
                id=diagnostic_id,
                category=match.group(2) if self._take_category else None,
                name=name if self._take_name else None,
            )
        return records
