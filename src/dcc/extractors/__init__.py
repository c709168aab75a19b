# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extractor variants for the diagnostic code collector."""

from dcc.extractors.constants import EnumCodeExtractor, SymbolConstantExtractor
from dcc.extractors.markdown import (
    HeadingDescriptorExtractor,
    MarkdownTableExtractor,
    ReleaseTableExtractor,
)
from dcc.extractors.resources import (
    MAX_MESSAGE_LENGTH,
    ResourceExtractor,
    parse_resource_strings,
)
from dcc.extractors.source import DescriptorFactoryExtractor, SourceScanExtractor

__all__ = [
    "DescriptorFactoryExtractor",
    "EnumCodeExtractor",
    "HeadingDescriptorExtractor",
    "MAX_MESSAGE_LENGTH",
    "MarkdownTableExtractor",
    "ReleaseTableExtractor",
    "ResourceExtractor",
    "SourceScanExtractor",
    "SymbolConstantExtractor",
    "parse_resource_strings",
]
