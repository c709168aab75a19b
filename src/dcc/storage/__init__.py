# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Storage backends for the diagnostic code collector."""

from dcc.storage.json_files import JsonDirectoryPersistence

__all__ = ["JsonDirectoryPersistence"]
