"""
textquarry content extraction.

A URL goes through an ordered chain of acquisition strategies. Rendered
markdown is cleaned directly by a line-level noise filter. Raw HTML is
first narrowed to its main content container by a readability-style
scorer and a link-density pruner. The surviving text is assembled with
page metadata into a ScrapedResult.
"""

from .bot_detection import is_bot_wall
from .manager import ContentExtractor
from .metadata import ResultAssembler
from .models import FetchAttemptOutcome, ScoredCandidate, ScrapedResult, SiteType
from .noise_filters import GENERIC_FILTER, SOCIAL_FILTER, NoiseFilter, NoiseRule, clean_generic, clean_social
from .readability_scorer import ContentScorer, LinkDensityPruner
from .soup_document import SoupDocument
from .strategies import JsonProxyStrategy, RawProxyStrategy, RenderProxyStrategy, Strategy, build_strategies

__all__ = [
    "ContentExtractor",
    "ScrapedResult",
    "SiteType",
    "FetchAttemptOutcome",
    "ScoredCandidate",
    "is_bot_wall",
    "ContentScorer",
    "LinkDensityPruner",
    "SoupDocument",
    "NoiseFilter",
    "NoiseRule",
    "GENERIC_FILTER",
    "SOCIAL_FILTER",
    "clean_generic",
    "clean_social",
    "ResultAssembler",
    "Strategy",
    "RenderProxyStrategy",
    "JsonProxyStrategy",
    "RawProxyStrategy",
    "build_strategies",
]
