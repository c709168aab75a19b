# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Generic source-code scanners for diagnostic identifiers."""

import bisect
import logging
import re

from dcc.categorizer import RangeTable, categorize
from dcc.extractor import Artifact
from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)


class SourceScanExtractor:
    """Scan arbitrary source text for identifier declarations and literals.

    Named constants (``const string DiagnosticId = "ASP0001"`` or
    ``const string LOGGEN000 = nameof(LOGGEN000)``) are collected first and
    carry a name. Bare quoted literals only add identifiers that no named
    constant in the same file declared.
    """

    def __init__(
        self,
        id_pattern: str,
        categories: RangeTable | None = None,
        named_constants: bool = True,
        literals: bool = True,
    ) -> None:
        """Initialize scanner.

        Args:
            id_pattern: Unanchored regular expression matching one identifier.
            categories: Optional range table used to label each record.
            named_constants: Collect ``const string Name = "ID"`` declarations.
            literals: Collect bare ``"ID"`` literals.
        """
        self._categories = categories
        self._named_constants = named_constants
        self._literals = literals
        self._constant_regex = re.compile(
            r"const\s+string\s+(\w+)\s*=\s*(?:\"("
            + id_pattern
            + r")\"|nameof\(\s*("
            + id_pattern
            + r")\s*\))"
        )
        self._literal_regex = re.compile(r"\"(" + id_pattern + r")\"")

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        records: dict[str, DiagnosticRecord] = {}
        if self._named_constants:
            for match in self._constant_regex.finditer(artifact.text):
                diagnostic_id = match.group(2) or match.group(3)
                if diagnostic_id in records:
                    continue
                records[diagnostic_id] = self._record(diagnostic_id, name=match.group(1))
        if self._literals:
            for match in self._literal_regex.finditer(artifact.text):
                diagnostic_id = match.group(1)
                if diagnostic_id in records:
                    continue
                records[diagnostic_id] = self._record(diagnostic_id, name=None)
        return records

    def _record(self, diagnostic_id: str, name: str | None) -> DiagnosticRecord:
        return DiagnosticRecord(
            id=diagnostic_id,
            category=(
                categorize(diagnostic_id, self._categories)
                if self._categories is not None
                else None
            ),
            name=name,
        )


class DescriptorFactoryExtractor:
    """Scan diagnostic factory classes built around a shared prefix constant.

    Descriptors are created as ``new($"{DiagnosticPrefix}1000", ...)`` and
    assigned to a named field declared just before; that field name becomes
    the record name. Plain ``new("RZ1000", ...)`` calls are picked up too,
    without a name.
    """

    def __init__(
        self,
        prefix: str,
        width: int = 4,
        categories: RangeTable | None = None,
        prefix_constant: str = "DiagnosticPrefix",
    ) -> None:
        self._prefix = prefix
        self._categories = categories
        digits = r"(\d{" + str(width) + r"})"
        self._prefixed_regex = re.compile(
            r"new\(\s*\$?\"\{?" + re.escape(prefix_constant) + r"\}?" + digits + "\""
        )
        self._direct_regex = re.compile(
            r"new\(\s*\"(" + re.escape(prefix) + r"\d{" + str(width) + r"})\""
        )
        self._descriptor_regex = re.compile(r"\w*DiagnosticDescriptor\s+(\w+)\s*=")

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        text = artifact.text
        declarations = [
            (match.start(), match.group(1))
            for match in self._descriptor_regex.finditer(text)
        ]
        positions = [position for position, _ in declarations]

        records: dict[str, DiagnosticRecord] = {}
        for match in self._prefixed_regex.finditer(text):
            diagnostic_id = f"{self._prefix}{match.group(1)}"
            if diagnostic_id in records:
                continue
            index = bisect.bisect_right(positions, match.start()) - 1
            name = declarations[index][1] if index >= 0 else None
            records[diagnostic_id] = self._record(diagnostic_id, name=name)

        for match in self._direct_regex.finditer(text):
            diagnostic_id = match.group(1)
            if diagnostic_id in records:
                continue
            records[diagnostic_id] = self._record(diagnostic_id, name=None)
        return records

    def _record(self, diagnostic_id: str, name: str | None) -> DiagnosticRecord:
        return DiagnosticRecord(
            id=diagnostic_id,
            category=(
                categorize(diagnostic_id, self._categories)
                if self._categories is not None
                else None
            ),
            name=name,
        )
