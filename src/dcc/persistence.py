# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Persistence contracts."""

import logging
from dataclasses import dataclass
from typing import Protocol

from dcc.model import Family

logger = logging.getLogger(__name__)


class PersistenceError(RuntimeError):
    """Represent a fatal persistence operation failure."""


@dataclass(frozen=True)
class PersistResult:
    """Represent the persisted output summary.

    Attributes:
        location: Where the output was written.
        family_count: Number of family files written.
        record_count: Total number of records across all families.
        files: Written file names in write order, index last.
    """

    location: str
    family_count: int
    record_count: int
    files: list[str]


class Persistence(Protocol):
    """Define the contract for persisting collected families and the index."""

    def persist(self, families: list[Family]) -> PersistResult:
        """Persist all families and the index as one output snapshot."""
