"""Adapter for DopeBox/SFlix-style streaming sites."""

from __future__ import annotations

from .client import DopeFlixSite

__all__ = ["DopeFlixSite"]
