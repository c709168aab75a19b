# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""JSON directory persistence: one file per family plus ``index.json``."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dcc.assembler import INDEX_VERSION, build_index, family_file_name
from dcc.model import Family, to_payload
from dcc.persistence import PersistenceError, PersistResult

logger = logging.getLogger(__name__)

INDEX_FILE_NAME: str = "index.json"
PARTIAL_SUFFIX: str = ".partial"


class JsonDirectoryPersistence:
    """Write family record sets and the index to a directory."""

    def __init__(self, output_dir: Path) -> None:
        """Initialize persistence backend.

        Args:
            output_dir: Target directory, created when missing.
        """
        self._output_dir = output_dir

    def persist(self, families: list[Family]) -> PersistResult:
        """Write every family file, then the index.

        All documents are serialized before the first write so a serialization
        failure leaves the directory untouched. Files are staged with a
        ``.partial`` suffix and moved into place only once every document is
        on disk; a write failure removes the staged files.

        Args:
            families: Assembled families to write.

        Returns:
            Persisted output summary.

        Raises:
            PersistenceError: If serialization or any file operation fails.
        """
        generated_at = datetime.now(tz=timezone.utc).isoformat()
        try:
            documents: list[tuple[str, str]] = [
                (
                    family_file_name(family.prefix),
                    _dumps(family_document(family, generated_at)),
                )
                for family in families
            ]
            documents.append(
                (INDEX_FILE_NAME, _dumps(index_document(families, generated_at)))
            )
        except (TypeError, ValueError) as exc:
            logger.warning(f"JSON serialization failed (error={exc})")
            raise PersistenceError(str(exc)) from exc

        staged: list[tuple[Path, Path]] = []
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            for file_name, content in documents:
                target = self._output_dir / file_name
                partial = target.with_name(file_name + PARTIAL_SUFFIX)
                partial.write_text(content, encoding="utf-8")
                staged.append((partial, target))
            for partial, target in staged:
                partial.replace(target)
                logger.info(f"Wrote output file (file={target.name})")
        except OSError as exc:
            logger.warning(
                f"JSON persistence failed (output_dir={self._output_dir} error={exc})"
            )
            for partial, _ in staged:
                partial.unlink(missing_ok=True)
            raise PersistenceError(str(exc)) from exc

        return PersistResult(
            location=str(self._output_dir),
            family_count=len(families),
            record_count=sum(family.count for family in families),
            files=[file_name for file_name, _ in documents],
        )


def family_document(family: Family, generated_at: str) -> dict[str, Any]:
    """Build the serialized document of one family."""
    return {
        "prefix": family.prefix,
        "repo": family.descriptor.repo,
        "description": family.descriptor.description,
        "generated_at": generated_at,
        "diagnostics": [to_payload(record) for record in family.records],
    }


def index_document(families: list[Family], generated_at: str) -> dict[str, Any]:
    """Build the serialized index over all families."""
    return {
        "version": INDEX_VERSION,
        "generated_at": generated_at,
        "prefixes": build_index(families),
    }


def _dumps(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
