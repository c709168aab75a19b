# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Resource (.resx) extractors."""

import logging
import re
import xml.etree.ElementTree as ET

from dcc.categorizer import RangeTable, categorize
from dcc.extractor import Artifact, ExtractionError
from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH: int = 200
TRUNCATION_MARKER: str = "..."


def iter_resource_entries(text: str) -> list[tuple[str | None, str]]:
    """Parse resource XML into ``(key, value)`` entries in document order.

    Args:
        text: Resource file content.

    Returns:
        Entries for every ``data`` element that has a ``value`` child.

    Raises:
        ExtractionError: If the content is not well-formed XML.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise ExtractionError(f"Malformed resource XML: {exc}") from exc
    entries: list[tuple[str | None, str]] = []
    for data in root.iter("data"):
        value = data.find("value")
        if value is None or value.text is None:
            continue
        entries.append((data.get("name"), value.text))
    return entries


def parse_resource_strings(text: str) -> dict[str, str]:
    """Parse resource XML into a key to value mapping.

    Raises:
        ExtractionError: If the content is not well-formed XML.
    """
    strings: dict[str, str] = {}
    for key, value in iter_resource_entries(text):
        if key is not None:
            strings[key] = value
    return strings


def truncate_message(message: str, max_length: int | None) -> str:
    """Cut a message at ``max_length`` characters and append a marker."""
    if max_length is None or len(message) <= max_length:
        return message
    return message[:max_length] + TRUNCATION_MARKER


class ResourceExtractor:
    """Extract resource entries whose value reads ``ID: message``."""

    def __init__(
        self,
        id_pattern: str,
        categories: RangeTable | None = None,
        max_message_length: int | None = MAX_MESSAGE_LENGTH,
    ) -> None:
        """Initialize extractor.

        Args:
            id_pattern: Unanchored regular expression matching one identifier.
            categories: Optional range table used to label each record.
            max_message_length: Truncation threshold; ``None`` keeps full text.
        """
        self._categories = categories
        self._max_message_length = max_message_length
        self._value_regex = re.compile(
            r"^(" + id_pattern + r"):\s*(.+)$", re.DOTALL
        )

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        """Extract records from one resource artifact.

        Raises:
            ExtractionError: If the artifact is not well-formed XML.
        """
        records: dict[str, DiagnosticRecord] = {}
        for key, value in iter_resource_entries(artifact.text):
            match = self._value_regex.match(value.strip())
            if match is None:
                continue
            diagnostic_id = match.group(1)
            if diagnostic_id in records:
                continue
            records[diagnostic_id] = DiagnosticRecord(
                id=diagnostic_id,
                category=(
                    categorize(diagnostic_id, self._categories)
                    if self._categories is not None
                    else None
                ),
                name=key,
                message=truncate_message(
                    match.group(2).strip(), self._max_message_length
                ),
            )
        return records
