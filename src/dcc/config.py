# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Collector configuration file loading."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Represent an unreadable or invalid configuration file."""


@dataclass(frozen=True)
class PrefixConfig:
    """Describe URL templates and metadata for one prefix.

    Attributes:
        description: Human description of the prefix.
        pattern: Identifier pattern.
        help_url: Human documentation URL template with ``{id}``.
        markdown_url: Raw markdown URL template with ``{id}``.
        index_url: URL of a page listing all codes of the prefix.
    """

    description: str | None = None
    pattern: str | None = None
    help_url: str | None = None
    markdown_url: str | None = None
    index_url: str | None = None

    def help_url_for(self, diagnostic_id: str) -> str | None:
        if self.help_url is None:
            return None
        return self.help_url.replace("{id}", diagnostic_id.lower())

    def markdown_url_for(self, diagnostic_id: str) -> str | None:
        if self.markdown_url is None:
            return None
        return self.markdown_url.replace("{id}", diagnostic_id.lower())

    @property
    def has_per_id_markdown(self) -> bool:
        """Whether markdown URLs differ per identifier."""
        return self.markdown_url is not None and "{id}" in self.markdown_url


@dataclass(frozen=True)
class RepoConfig:
    prefixes: dict[str, PrefixConfig] = field(default_factory=dict)


@dataclass(frozen=True)
class CollectorConfig:
    """Top-level configuration: ``repos -> prefixes -> PrefixConfig``."""

    repos: dict[str, RepoConfig] = field(default_factory=dict)

    def prefix_configs(self) -> dict[str, PrefixConfig]:
        """Flatten all repositories into an upper-cased prefix lookup."""
        flattened: dict[str, PrefixConfig] = {}
        for repo in self.repos.values():
            for prefix, prefix_config in repo.prefixes.items():
                flattened[prefix.upper()] = prefix_config
        return flattened

    def get_prefix(self, prefix: str) -> PrefixConfig | None:
        return self.prefix_configs().get(prefix.upper())

    @classmethod
    def from_dict(cls, payload: Any) -> "CollectorConfig":
        """Build configuration from decoded JSON.

        Raises:
            ConfigError: If the structure does not match the expected shape.
        """
        if not isinstance(payload, dict):
            raise ConfigError("Configuration root must be an object.")
        repos_payload = payload.get("repos", {})
        if not isinstance(repos_payload, dict):
            raise ConfigError("'repos' must be an object.")
        repos: dict[str, RepoConfig] = {}
        for repo_name, repo_payload in repos_payload.items():
            prefixes_payload = (
                repo_payload.get("prefixes", {}) if isinstance(repo_payload, dict) else None
            )
            if not isinstance(prefixes_payload, dict):
                raise ConfigError(f"'repos.{repo_name}.prefixes' must be an object.")
            prefixes: dict[str, PrefixConfig] = {}
            for prefix, prefix_payload in prefixes_payload.items():
                if not isinstance(prefix_payload, dict):
                    raise ConfigError(
                        f"'repos.{repo_name}.prefixes.{prefix}' must be an object."
                    )
                prefixes[prefix] = PrefixConfig(
                    description=_optional_str(prefix_payload, "description"),
                    pattern=_optional_str(prefix_payload, "pattern"),
                    help_url=_optional_str(prefix_payload, "helpUrl"),
                    markdown_url=_optional_str(prefix_payload, "markdownUrl"),
                    index_url=_optional_str(prefix_payload, "indexUrl"),
                )
            repos[repo_name] = RepoConfig(prefixes=prefixes)
        return cls(repos=repos)


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {type(value).__name__}.")
    return value


def load_config(path: Path) -> CollectorConfig:
    """Load a collector configuration file.

    Args:
        path: JSON configuration file path.

    Returns:
        Parsed configuration.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning(f"Failed to load configuration (path={path} error={exc})")
        raise ConfigError(f"Cannot load configuration {path}: {exc}") from exc
    config = CollectorConfig.from_dict(payload)
    logger.info(f"Loaded configuration (path={path} repos={len(config.repos)})")
    return config
