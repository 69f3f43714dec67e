"""
textquarry - main-content extraction for web pages and social posts.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import Config
from .extractor import ContentExtractor, ScrapedResult, SiteType

__all__ = ["__version__", "Config", "ContentExtractor", "ScrapedResult", "SiteType"]
