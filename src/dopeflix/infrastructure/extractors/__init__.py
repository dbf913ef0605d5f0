"""Extractors turning hosting-server embed URLs into video variants."""

from __future__ import annotations

from .doodstream import DoodStreamExtractor
from .json_source import JsonSourceExtractor
from .playlist import PlaylistExpander
from .registry import ExtractorRegistry

__all__ = [
    "DoodStreamExtractor",
    "ExtractorRegistry",
    "JsonSourceExtractor",
    "PlaylistExpander",
]
