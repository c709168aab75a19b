# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Collection pipeline: extract, reconcile, categorize and assemble families."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path

import pathspec

from dcc.assembler import assemble_family
from dcc.categorizer import categorize
from dcc.config import CollectorConfig, PrefixConfig
from dcc.extractor import Artifact, CollectorError, ExtractionError
from dcc.families import ExtractionPass, FamilySpec, RepositorySpec, render_url
from dcc.model import DiagnosticRecord, Family
from dcc.reconciler import SourceObservations, dedupe_first, reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionResult:
    """Represent the outcome of collecting one or more repositories."""

    families: list[Family]
    errors: list[CollectorError]


class ArtifactMatcher:
    """Select pass artifacts beneath a directory with gitwildmatch patterns."""

    def __init__(
        self, include: pathspec.GitIgnoreSpec, exclude: pathspec.GitIgnoreSpec | None
    ) -> None:
        self._include = include
        self._exclude = exclude

    @classmethod
    def for_pass(cls, extraction_pass: ExtractionPass) -> "ArtifactMatcher":
        include = pathspec.GitIgnoreSpec.from_lines(extraction_pass.patterns)
        exclude = (
            pathspec.GitIgnoreSpec.from_lines(extraction_pass.exclude)
            if extraction_pass.exclude
            else None
        )
        return cls(include=include, exclude=exclude)

    def matches(self, relative_path: str) -> bool:
        """Check whether a POSIX path relative to the pass root is selected."""
        if not self._include.match_file(relative_path):
            return False
        if self._exclude is not None and self._exclude.match_file(relative_path):
            return False
        return True

    def discover(self, base: Path) -> list[Path]:
        """List matching files beneath ``base`` in a stable order."""
        return [
            path
            for path in sorted(base.rglob("*"))
            if path.is_file() and self.matches(path.relative_to(base).as_posix())
        ]


class Collector:
    """Collect diagnostic families from local repository checkouts."""

    def __init__(self, config: CollectorConfig | None = None) -> None:
        """Initialize collector.

        Args:
            config: Optional configuration whose per-prefix URL templates take
                precedence over the built-in family templates.
        """
        self._config = config

    def collect(self, repositories: Sequence[tuple[RepositorySpec, Path]]) -> CollectionResult:
        """Collect every family of the given repositories.

        Args:
            repositories: Repository specifications paired with checkout roots.

        Returns:
            Assembled families and recoverable per-artifact errors.
        """
        families: list[Family] = []
        errors: list[CollectorError] = []
        for repository, root_path in repositories:
            logger.info(f"Collecting repository (repo={repository.name} path={root_path})")
            for family_spec in repository.families:
                family = self.collect_family(family_spec, root_path, errors)
                if family.count == 0 and not family_spec.always_emit:
                    logger.info(
                        f"Omitting empty family (prefix={family_spec.prefix} repo={repository.name})"
                    )
                    continue
                families.append(family)
        return CollectionResult(families=families, errors=errors)

    def collect_family(
        self, family_spec: FamilySpec, root_path: Path, errors: list[CollectorError]
    ) -> Family:
        """Run all passes of one family and assemble the result.

        Args:
            family_spec: Family configuration.
            root_path: Repository checkout root.
            errors: Accumulator for recoverable artifact errors.

        Returns:
            The assembled family, possibly with zero records.
        """
        sources = [
            SourceObservations(
                label=extraction_pass.label,
                role=extraction_pass.role,
                records=self._run_pass(extraction_pass, root_path, errors),
            )
            for extraction_pass in family_spec.passes
        ]
        records = reconcile(sources)
        prefix_config = (
            self._config.get_prefix(family_spec.prefix) if self._config is not None else None
        )
        records = [self._finalize(record, family_spec, prefix_config) for record in records]
        family = assemble_family(family_spec.descriptor, records)
        logger.info(
            f"Collected family (prefix={family_spec.prefix} repo={family_spec.repo} "
            f"records={family.count})"
        )
        return family

    def _run_pass(
        self,
        extraction_pass: ExtractionPass,
        root_path: Path,
        errors: list[CollectorError],
    ) -> dict[str, DiagnosticRecord]:
        base = root_path / extraction_pass.root
        if not base.is_dir():
            logger.info(
                f"Artifact directory not found; pass contributes no records "
                f"(pass={extraction_pass.label} path={base})"
            )
            return {}
        files = ArtifactMatcher.for_pass(extraction_pass).discover(base)
        if not files:
            logger.info(
                f"No artifacts matched; pass contributes no records "
                f"(pass={extraction_pass.label} path={base})"
            )
            return {}

        related = self._load_related(extraction_pass, root_path, errors)
        observed: list[DiagnosticRecord] = []
        for file_path in files:
            relative_path = file_path.relative_to(root_path).as_posix()
            try:
                text = file_path.read_text(encoding="utf-8-sig")
                records = extraction_pass.extractor.extract(
                    Artifact(path=relative_path, text=text, related=related)
                )
            except (OSError, UnicodeDecodeError, ExtractionError) as exc:
                logger.warning(
                    f"Skipping artifact due to read/parse failure "
                    f"(file_path={relative_path} error={exc})"
                )
                errors.append(CollectorError(file_path=relative_path, message=str(exc)))
                continue
            observed.extend(records.values())
        records = dedupe_first(observed)
        logger.info(
            f"Extraction pass finished (pass={extraction_pass.label} "
            f"files={len(files)} records={len(records)})"
        )
        return records

    def _load_related(
        self,
        extraction_pass: ExtractionPass,
        root_path: Path,
        errors: list[CollectorError],
    ) -> tuple[Artifact, ...]:
        related: list[Artifact] = []
        for relative_path in extraction_pass.related:
            path = root_path / relative_path
            if not path.is_file():
                logger.info(f"Related artifact not found (file_path={relative_path})")
                continue
            try:
                related.append(
                    Artifact(path=relative_path, text=path.read_text(encoding="utf-8-sig"))
                )
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning(
                    f"Skipping related artifact due to read failure "
                    f"(file_path={relative_path} error={exc})"
                )
                errors.append(CollectorError(file_path=relative_path, message=str(exc)))
        return tuple(related)

    def _finalize(
        self,
        record: DiagnosticRecord,
        family_spec: FamilySpec,
        prefix_config: PrefixConfig | None,
    ) -> DiagnosticRecord:
        """Fill category and URLs that no extractor supplied.

        URLs observed by an extractor are kept. Otherwise the configured
        ``markdownUrl``/``helpUrl`` templates win over the family templates,
        and the configured ``indexUrl`` is the last resort for ``doc_url``.
        """
        category = record.category
        if category is None and family_spec.categories is not None:
            category = categorize(record.id, family_spec.categories)
        doc_url = record.doc_url
        error_url = record.error_url
        if prefix_config is not None:
            doc_url = doc_url or prefix_config.markdown_url_for(record.id)
            error_url = error_url or prefix_config.help_url_for(record.id)
        doc_url = doc_url or render_url(family_spec.doc_url_template, record.id)
        error_url = error_url or render_url(family_spec.error_url_template, record.id)
        if doc_url is None and prefix_config is not None:
            doc_url = prefix_config.index_url
        return replace(record, category=category, doc_url=doc_url, error_url=error_url)
