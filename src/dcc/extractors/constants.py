# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extractors for constant and enum declarations of diagnostic codes."""

import logging
import re

from dcc.categorizer import RangeTable, categorize
from dcc.extractor import Artifact, ExtractionError
from dcc.extractors.resources import parse_resource_strings
from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)

_CONST_STRING_DECL = (
    r"(?:(?:internal|public|private|protected)\s+)?(?:static\s+)?const\s+string\s+"
)
_STRING_LITERAL = r'"((?:[^"\\\n]|\\.)*)"'

DEFAULT_SEVERITY_PREFIXES: tuple[str, ...] = ("ERR", "WRN", "FTL", "HDN", "INF")


def unescape_literal(value: str) -> str:
    """Undo the common backslash escapes of a C-style string literal."""
    return value.replace('\\"', '"').replace("\\\\", "\\")


class SymbolConstantExtractor:
    """Join identifier constants with their correlated message constants.

    ``SystemTextEncodingUTF7DiagId = "SYSLIB0001"`` and
    ``SystemTextEncodingUTF7Message = "..."`` share the base name
    ``SystemTextEncodingUTF7``, which becomes the record name.
    """

    def __init__(
        self,
        id_pattern: str,
        id_suffix: str = "DiagId",
        message_suffix: str = "Message",
        categories: RangeTable | None = None,
    ) -> None:
        """Initialize extractor.

        Args:
            id_pattern: Unanchored regular expression matching one identifier.
            id_suffix: Name suffix of constants holding identifiers.
            message_suffix: Name suffix of constants holding messages.
            categories: Optional range table used to label each record.
        """
        self._categories = categories
        self._id_regex = re.compile(
            _CONST_STRING_DECL
            + r"(\w+)"
            + re.escape(id_suffix)
            + r'\s*=\s*"('
            + id_pattern
            + r')"\s*;'
        )
        self._message_regex = re.compile(
            _CONST_STRING_DECL
            + r"(\w+)"
            + re.escape(message_suffix)
            + r"\s*=\s*"
            + _STRING_LITERAL
            + r"\s*;"
        )

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        messages: dict[str, str] = {}
        for match in self._message_regex.finditer(artifact.text):
            messages.setdefault(match.group(1), unescape_literal(match.group(2)))

        records: dict[str, DiagnosticRecord] = {}
        for match in self._id_regex.finditer(artifact.text):
            name = match.group(1)
            diagnostic_id = match.group(2)
            if diagnostic_id in records:
                continue
            records[diagnostic_id] = DiagnosticRecord(
                id=diagnostic_id,
                category=(
                    categorize(diagnostic_id, self._categories)
                    if self._categories is not None
                    else None
                ),
                name=name,
                message=messages.get(name),
            )
        logger.debug(
            f"Parsed symbol constants (file_path={artifact.path} "
            f"records={len(records)} messages={len(messages)})"
        )
        return records


class EnumCodeExtractor:
    """Extract numbered enum members such as ``ERR_BadBinaryOps = 19``.

    The identifier is the prefix plus the zero-padded number, the name is the
    full member name and the category is its severity prefix. Messages are
    looked up by member name in the artifact's related resource files.
    """

    def __init__(
        self,
        prefix: str,
        width: int = 4,
        severity_prefixes: tuple[str, ...] = DEFAULT_SEVERITY_PREFIXES,
    ) -> None:
        self._prefix = prefix
        self._width = width
        self._member_regex = re.compile(
            r"^\s*((?:" + "|".join(severity_prefixes) + r")_\w+)\s*=\s*(\d+)",
            re.MULTILINE,
        )

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        messages = self._load_messages(artifact)
        members: list[tuple[int, str]] = [
            (int(match.group(2)), match.group(1))
            for match in self._member_regex.finditer(artifact.text)
        ]
        records: dict[str, DiagnosticRecord] = {}
        for number, member_name in sorted(members, key=lambda item: item[0]):
            diagnostic_id = f"{self._prefix}{number:0{self._width}d}"
            if diagnostic_id in records:
                continue
            records[diagnostic_id] = DiagnosticRecord(
                id=diagnostic_id,
                category=member_name.split("_", 1)[0],
                name=member_name,
                message=messages.get(member_name),
            )
        return records

    def _load_messages(self, artifact: Artifact) -> dict[str, str]:
        messages: dict[str, str] = {}
        for related in artifact.related:
            try:
                strings = parse_resource_strings(related.text)
            except ExtractionError as exc:
                logger.warning(
                    f"Skipping malformed message resource (file_path={related.path} error={exc})"
                )
                continue
            for key, value in strings.items():
                messages.setdefault(key, value)
        return messages
