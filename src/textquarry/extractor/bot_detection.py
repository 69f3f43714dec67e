"""
Detection of challenge and block pages served instead of content.

Each acquisition path sees a different slice of the page, so each gets
its own signature set. Rendered markdown carries the block page's body
text, while raw HTML is judged by its ``<title>`` alone. Matching is
case-insensitive.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..exceptions import BotProtectionError


@dataclass(frozen=True)
class BotWallSignatures:
    """Challenge-page wording, split by where it must appear."""

    # A title equal to one of these is a challenge page.
    title_exact: Tuple[str, ...] = ()
    # A title containing one of these is a challenge page.
    title_contains: Tuple[str, ...] = ()
    # A body sample containing one of these is a challenge page.
    body_contains: Tuple[str, ...] = ()

    def __add__(self, other: "BotWallSignatures") -> "BotWallSignatures":
        return BotWallSignatures(
            title_exact=_merge(self.title_exact, other.title_exact),
            title_contains=_merge(self.title_contains, other.title_contains),
            body_contains=_merge(self.body_contains, other.body_contains),
        )


def _merge(first: Tuple[str, ...], second: Tuple[str, ...]) -> Tuple[str, ...]:
    return first + tuple(item for item in second if item not in first)


# Rendered markdown: a page whose title merely mentions Cloudflare is an article.
RENDERED_SIGNATURES = BotWallSignatures(
    title_exact=("just a moment...",),
    title_contains=("robot challenge",),
    body_contains=(
        "robot challenge",
        "requiring captcha",
        "checking the site connection security",
        "451 unavailable",
        "access denied",
    ),
)

# Raw HTML: body text is not inspected, SPA shells often show loading wording.
HTML_SIGNATURES = BotWallSignatures(
    title_exact=("just a moment...",),
    title_contains=("robot challenge", "security check", "cloudflare"),
)

ALL_SIGNATURES = RENDERED_SIGNATURES + HTML_SIGNATURES


def match_bot_wall(
    title: Optional[str],
    body_sample: str = "",
    signatures: BotWallSignatures = ALL_SIGNATURES,
) -> Optional[str]:
    """Return the signature that marks this page as a bot wall, if any."""
    normalized_title = (title or "").strip().lower()
    if normalized_title in signatures.title_exact:
        return normalized_title
    for signature in signatures.title_contains:
        if signature in normalized_title:
            return signature

    sample = body_sample.lower()
    for signature in signatures.body_contains:
        if signature in sample:
            return signature
    return None


def is_bot_wall(title: Optional[str], body_sample: str = "", signatures: BotWallSignatures = ALL_SIGNATURES) -> bool:
    return match_bot_wall(title, body_sample, signatures) is not None


def ensure_not_bot_wall(
    title: Optional[str],
    body_sample: str = "",
    signatures: BotWallSignatures = ALL_SIGNATURES,
) -> None:
    """Raise BotProtectionError when the page is a challenge page."""
    signature = match_bot_wall(title, body_sample, signatures)
    if signature is not None:
        raise BotProtectionError(f"Blocked by bot protection ({signature!r})")
