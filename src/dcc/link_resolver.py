# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Resolve short documentation links to their canonical destination."""

import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Literal
from urllib.parse import urljoin, urlsplit, urlunsplit

import requests

from dcc.model import DiagnosticRecord

logger = logging.getLogger(__name__)

MAX_REDIRECTS: int = 5
REQUEST_TIMEOUT_SECONDS: float = 10.0
REQUEST_DELAY_SECONDS: float = 0.025

REDIRECT_STATUSES: frozenset[int] = frozenset({301, 302, 307, 308})
BROKEN_LINK_HOSTS: frozenset[str] = frozenset({"www.bing.com", "bing.com"})
STRIPPED_QUERY_PARAMS: tuple[str, ...] = ("f1url", "view")
LOCALE_DOMAINS: frozenset[str] = frozenset({"learn.microsoft.com", "docs.microsoft.com"})

_LOCALE_SEGMENT = re.compile(r"^/[a-z]{2}-[a-z]{2}(?=/|$)", re.IGNORECASE)

ResolutionStatus = Literal["resolved", "same_host", "broken_link", "error"]


@dataclass(frozen=True)
class ResolutionOutcome:
    """Represent the classified result of resolving one short link.

    Attributes:
        source_url: Link that was resolved.
        status: ``resolved``, ``same_host`` (discarded), ``broken_link``
            (redirected to a generic fallback host) or ``error``.
        final_url: Cleaned destination, set only when ``status`` is
            ``resolved``.
        detail: Failure detail for ``broken_link`` and ``error``.
    """

    source_url: str
    status: ResolutionStatus
    final_url: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class ResolutionWarning:
    """Represent one reportable resolution failure."""

    diagnostic_id: str
    url: str
    message: str


def strip_query_params(url: str, names: Sequence[str] = STRIPPED_QUERY_PARAMS) -> str:
    """Remove the named query parameters from a URL.

    Remaining parameters are kept exactly as written, encoding included.
    """
    parts = urlsplit(url)
    if not parts.query:
        return url
    kept = [pair for pair in parts.query.split("&") if pair.split("=", 1)[0] not in names]
    return urlunsplit(parts._replace(query="&".join(kept)))


def strip_locale(url: str) -> str:
    """Drop a leading ``/xx-yy`` locale segment for known documentation hosts."""
    parts = urlsplit(url)
    if (parts.hostname or "").lower() not in LOCALE_DOMAINS:
        return url
    path = _LOCALE_SEGMENT.sub("", parts.path, count=1)
    return urlunsplit(parts._replace(path=path or "/"))


class UrlResolver:
    """Follow redirect chains of documentation short links."""

    def __init__(
        self,
        session: requests.Session | None = None,
        max_redirects: int = MAX_REDIRECTS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        delay_seconds: float = REQUEST_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize resolver.

        Args:
            session: HTTP session; a new one is created when omitted.
            max_redirects: Maximum number of redirect hops followed.
            timeout: Per-request timeout in seconds.
            delay_seconds: Pause between consecutive records.
            sleep: Sleep function, injectable for tests.

        Raises:
            ValueError: If ``max_redirects`` is not greater than zero.
        """
        if max_redirects <= 0:
            raise ValueError("max_redirects must be > 0")
        self._session = session or requests.Session()
        self._max_redirects = max_redirects
        self._timeout = timeout
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._cache: dict[str, ResolutionOutcome] = {}
        self.warnings: list[ResolutionWarning] = []

    def resolve_url(self, url: str) -> ResolutionOutcome:
        """Resolve one short link and classify the outcome.

        Network failures and malformed URLs never raise; they are reported
        as an ``error`` outcome.

        Args:
            url: Short link to resolve.

        Returns:
            Classified outcome.
        """
        try:
            final_url = strip_query_params(self._follow(url))
            final_host = (urlsplit(final_url).hostname or "").lower()
            source_host = (urlsplit(url).hostname or "").lower()
        except (requests.RequestException, ValueError) as exc:
            logger.warning(f"URL resolution failed (url={url} error={exc})")
            return ResolutionOutcome(source_url=url, status="error", detail=str(exc))

        if final_host in BROKEN_LINK_HOSTS:
            logger.warning(
                f"Short link redirected to a generic fallback page (url={url} final_url={final_url})"
            )
            return ResolutionOutcome(
                source_url=url,
                status="broken_link",
                detail=f"redirected to {final_host}",
            )
        if final_host == source_host:
            logger.debug(f"Discarding same-host resolution (url={url} final_url={final_url})")
            return ResolutionOutcome(source_url=url, status="same_host")
        return ResolutionOutcome(
            source_url=url, status="resolved", final_url=strip_locale(final_url)
        )

    def resolve_records(self, records: Sequence[DiagnosticRecord]) -> list[DiagnosticRecord]:
        """Set ``resolved_url`` on records whose ``error_url`` resolves elsewhere.

        Identical links are requested once per resolver. Records are processed
        sequentially with a fixed delay between network calls.

        Args:
            records: Records of one family.

        Returns:
            Records in the same order, enriched where resolution succeeded.
        """
        to_resolve = sum(1 for record in records if record.error_url)
        if to_resolve == 0:
            return list(records)

        resolved_count = 0
        failed_count = 0
        enriched: list[DiagnosticRecord] = []
        for record in records:
            if not record.error_url:
                enriched.append(record)
                continue
            outcome = self._cache.get(record.error_url)
            if outcome is None:
                outcome = self.resolve_url(record.error_url)
                self._cache[record.error_url] = outcome
                self._sleep(self._delay_seconds)
            if outcome.status == "resolved" and outcome.final_url is not None:
                enriched.append(replace(record, resolved_url=outcome.final_url))
                resolved_count += 1
                continue
            if outcome.status in ("broken_link", "error"):
                failed_count += 1
                self.warnings.append(
                    ResolutionWarning(
                        diagnostic_id=record.id,
                        url=record.error_url,
                        message=outcome.detail or outcome.status,
                    )
                )
            enriched.append(record)

        logger.info(
            "url_resolution_progress total=%s resolved=%s failed=%s",
            to_resolve,
            resolved_count,
            failed_count,
        )
        return enriched

    def _follow(self, url: str) -> str:
        """Walk the redirect chain from ``url`` and return the last location."""
        current_url = url
        for _ in range(self._max_redirects):
            response = self._session.get(
                current_url, allow_redirects=False, timeout=self._timeout
            )
            try:
                if response.status_code not in REDIRECT_STATUSES:
                    break
                location = response.headers.get("Location")
                if not location:
                    break
                current_url = urljoin(current_url, location)
            finally:
                response.close()
        return current_url
