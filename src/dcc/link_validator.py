# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Probe generated documentation URLs for missing pages."""

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import requests

from dcc.config import CollectorConfig
from dcc.link_resolver import REQUEST_DELAY_SECONDS, REQUEST_TIMEOUT_SECONDS
from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationWarning:
    """Represent one documentation page that is missing or unreachable."""

    diagnostic_id: str
    url: str
    message: str


class MarkdownValidator:
    """Check that per-identifier markdown documentation pages exist."""

    def __init__(
        self,
        config: CollectorConfig,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        delay_seconds: float = REQUEST_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._prefix_configs = config.prefix_configs()
        self._session = session or requests.Session()
        self._timeout = timeout
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self.warnings: list[ValidationWarning] = []

    def validate(self, prefix: str, records: Sequence[DiagnosticRecord]) -> int:
        """Probe the markdown URL of every record of one family.

        Families without a per-identifier markdown URL template are skipped.
        A 404 or a network failure is recorded as a warning; records are never
        modified.

        Args:
            prefix: Family prefix used to look up the URL template.
            records: Records of the family.

        Returns:
            Number of pages reported as not found.
        """
        prefix_config = self._prefix_configs.get(prefix.upper())
        if prefix_config is None or not prefix_config.has_per_id_markdown:
            logger.debug(f"Skipping markdown validation (prefix={prefix})")
            return 0

        logger.info(f"Validating markdown URLs (prefix={prefix} records={len(records)})")
        not_found = 0
        for record in records:
            url = prefix_config.markdown_url_for(record.id)
            if url is None:
                continue
            try:
                response = self._session.head(
                    url, allow_redirects=True, timeout=self._timeout
                )
                status_code = response.status_code
                response.close()
            except requests.RequestException as exc:
                logger.warning(
                    f"Markdown URL check failed (id={record.id} url={url} error={exc})"
                )
                self.warnings.append(
                    ValidationWarning(
                        diagnostic_id=record.id, url=url, message=f"error: {exc}"
                    )
                )
            else:
                if status_code == 404:
                    logger.warning(f"Markdown page not found (id={record.id} url={url})")
                    self.warnings.append(
                        ValidationWarning(diagnostic_id=record.id, url=url, message="404")
                    )
                    not_found += 1
            self._sleep(self._delay_seconds)

        if not_found:
            logger.info(f"Missing markdown pages (prefix={prefix} not_found={not_found})")
        else:
            logger.info(f"All markdown pages found (prefix={prefix} records={len(records)})")
        return not_found
