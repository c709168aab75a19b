"""Extractor interfaces and DTOs for diagnostic code extraction."""

from dataclasses import dataclass
from typing import Protocol

from dcc.model import DiagnosticRecord


class ExtractionError(RuntimeError):
    """Represent malformed artifact content that cannot be extracted."""


@dataclass(frozen=True)
class Artifact:
    """Represent one source artifact handed to an extractor.

    Attributes:
        path: Repository-relative artifact path.
        text: Full artifact text.
        related: Companion artifacts some extractors consult, e.g. the
            resource file holding messages for an enum of error codes.
    """

    path: str
    text: str
    related: tuple["Artifact", ...] = ()


@dataclass(frozen=True)
class CollectorError:
    """Represent a recoverable collection error for one artifact."""

    file_path: str
    message: str


class Extractor(Protocol):
    """Format-specific extractor contract."""

    def extract(self, artifact: Artifact) -> dict[str, DiagnosticRecord]:
        """Turn one artifact into partial records keyed by identifier.

        Raises:
            ExtractionError: If the artifact content is malformed.
        """
