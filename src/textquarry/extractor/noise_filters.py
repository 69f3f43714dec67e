"""
Line-oriented noise filters for linearized page text.

Two rule sets share one engine: ``GENERIC_FILTER`` for blogs and news pages
and ``SOCIAL_FILTER`` for social feed posts. Each line is normalized, then
checked against the rules in precedence order (end markers, exact lines,
patterns, heuristics). Surviving lines are joined as paragraphs.

Every decision depends only on the line itself and on state built from
surviving lines, so ``clean(clean(text)) == clean(text)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

import structlog

from .models import SiteType

logger = structlog.get_logger(__name__)


class RuleKind(Enum):
    """Rule families, in the order they are applied."""

    END_MARKER = "end_marker"
    EXACT = "exact"
    PATTERN = "pattern"
    HEURISTIC = "heuristic"


_KIND_ORDER = {kind: index for index, kind in enumerate(RuleKind)}


@dataclass(frozen=True)
class NoiseRule:
    """A named predicate over one normalized line.

    End markers only truncate once ``min_clean_lines`` lines have been kept;
    before that a matching line is dropped on its own.
    """

    name: str
    kind: RuleKind
    predicate: Callable[[str], bool] = field(compare=False)
    min_clean_lines: int = 0

    def matches(self, line: str) -> bool:
        return self.predicate(line)

    @classmethod
    def end_marker(cls, name: str, pattern: str, *, min_clean_lines: int, flags: int = re.IGNORECASE) -> "NoiseRule":
        regex = re.compile(pattern, flags)
        return cls(name, RuleKind.END_MARKER, lambda line: regex.search(line) is not None, min_clean_lines)

    @classmethod
    def exact(cls, name: str, lines: Iterable[str]) -> "NoiseRule":
        folded = frozenset(line.casefold() for line in lines)
        return cls(name, RuleKind.EXACT, lambda line: line.casefold() in folded)

    @classmethod
    def pattern(cls, name: str, pattern: str, flags: int = re.IGNORECASE) -> "NoiseRule":
        regex = re.compile(pattern, flags)
        return cls(name, RuleKind.PATTERN, lambda line: regex.search(line) is not None)

    @classmethod
    def heuristic(cls, name: str, predicate: Callable[[str], bool]) -> "NoiseRule":
        return cls(name, RuleKind.HEURISTIC, predicate)


# --- Shared pieces ---

_HASHTAG_LINK = re.compile(r"\[(#\w+)\]\([^)]*\)[ \t]*")
_MARKDOWN_LINK = re.compile(r"\]\(")
_PURE_LINK_BULLET = re.compile(r"^[*\-+]\s*\[.*?\]\(.*?\)$")
_SENTENCE_ENDINGS = (".", ":", "!", "?", '"')

RELATIVE_TIME = r"\d+\s?(?:mo|yr|[smhdwy])s?"


def too_many_links(line: str, limit: int = 2) -> bool:
    """More than ``limit`` markdown links on one line is a navigation bar."""
    return len(_MARKDOWN_LINK.findall(line)) > limit


def pure_link_bullet(line: str, max_length: int = 100) -> bool:
    """A short bullet that is nothing but a link."""
    return len(line) < max_length and _PURE_LINK_BULLET.match(line) is not None


def is_short_line(line: str) -> bool:
    """Fewer than four words and no sentence punctuation at the end."""
    return len(line.split()) < 4 and not line.endswith(_SENTENCE_ENDINGS)


def _shared_rules() -> List[NoiseRule]:
    return [
        NoiseRule.pattern("markdown_image", r"^\[?!\["),
        NoiseRule.pattern("render_proxy_header", r"^(Title|URL Source|Published Time|Markdown Content):"),
        NoiseRule.pattern("separator", r"^[-=_*]{3,}$"),
        NoiseRule.pattern("empty_link", r"^\[\]\(.*?\)$"),
        NoiseRule.pattern("relative_timestamp", rf"^{RELATIVE_TIME}$"),
        NoiseRule.pattern(
            "social_counts",
            r"^\d[\d,.]*[km]?\s+(followers|connections|comments|reactions|likes|reposts|shares)\b",
        ),
        NoiseRule.heuristic("link_density", too_many_links),
        NoiseRule.heuristic("pure_link_bullet", pure_link_bullet),
    ]


# --- Filter engine ---


class NoiseFilter:
    """Applies an ordered rule set to text, line by line."""

    def __init__(self, name: str, rules: Sequence[NoiseRule], *, tag_cloud_streak: Optional[int] = None) -> None:
        self.name = name
        # Stable sort keeps declaration order inside each family.
        self.rules: tuple[NoiseRule, ...] = tuple(sorted(rules, key=lambda rule: _KIND_ORDER[rule.kind]))
        self.tag_cloud_streak = tag_cloud_streak

    @staticmethod
    def normalize_line(line: str) -> str:
        """Trim the line and turn hashtag links into plain hashtags."""
        line = line.strip()
        while True:
            rewritten = _HASHTAG_LINK.sub(r"\1 ", line)
            if rewritten == line:
                break
            line = rewritten
        return line.strip()

    def first_match(self, line: str) -> Optional[NoiseRule]:
        for rule in self.rules:
            if rule.matches(line):
                return rule
        return None

    def clean(self, text: str) -> str:
        clean_lines: List[str] = []
        short_streak = 0

        for raw_line in text.splitlines():
            line = self.normalize_line(raw_line)
            if not line:
                continue

            rule = self.first_match(line)
            if rule is not None:
                if rule.kind is RuleKind.END_MARKER and len(clean_lines) >= rule.min_clean_lines:
                    logger.debug("End marker reached", filter=self.name, rule=rule.name, kept=len(clean_lines))
                    break
                continue

            if self.tag_cloud_streak is not None:
                short_streak = short_streak + 1 if is_short_line(line) else 0
                if short_streak > self.tag_cloud_streak:
                    continue

            clean_lines.append(line)

        return "\n\n".join(clean_lines)

    def is_noise(self, line: str) -> bool:
        """True when any rule of this filter matches the normalized line."""
        return self.first_match(self.normalize_line(line)) is not None


# --- Generic (blogs, news) ---

_GENERIC_END_MIN_LINES = 6

_GENERIC_END_SECTIONS = [
    "Related Articles",
    "Related Posts",
    "You might also like",
    "More from Author",
    "Recent Posts",
    "Follow us",
    "Connect with us",
    "Leave a Reply",
    "Comments",
    "TAGS",
    "Latest news",
    "Top 10",
    "About Us",
    "Contact Us",
]


def _generic_rules() -> List[NoiseRule]:
    rules = [
        NoiseRule.end_marker(
            f"section:{section.lower()}",
            rf"^#*\s*\[?{re.escape(section)}\b",
            min_clean_lines=_GENERIC_END_MIN_LINES,
        )
        for section in _GENERIC_END_SECTIONS
    ]
    rules += [
        NoiseRule.end_marker(
            "copyright",
            r"^#*\s*\[?(Copyright|©)\s*(\(c\)\s*)?\d{4}",
            min_clean_lines=_GENERIC_END_MIN_LINES,
        ),
        NoiseRule.exact(
            "generic_exact",
            [
                "Search",
                "Menu",
                "Home",
                "Skip to content",
                "Skip to main content",
                "Discover more",
                "Share",
                "Share this post",
                "Share this article",
                "Share on",
                "Click to share",
                "Read more",
                "Subscribe",
                "Log in",
                "Sign in",
                "Sign up",
                "Join now",
                "Privacy Policy",
                "Terms of Service",
                "About Us",
                "Contact Us",
                "Latest news",
                "Top stories",
                "Top 10",
                "Most watched",
                "Related articles",
                "Advertisement",
                "Previous",
                "Next",
                "Like",
                "Comment",
                "Comments",
                "Copy",
            ],
        ),
        NoiseRule.pattern(
            "nav_link",
            r"^[*\-+]?\s*\[(Home|Top 10|LinkedIn|Twitter|X|RSS|Facebook|Google News|Author|Related Articles"
            r"|More from Author|About Us|Contact Us|Privacy Policy|Terms of Service|Subscribe|Log in|Sign in|Sign up)\]"
            r"\(.*?\)",
        ),
        NoiseRule.pattern("dateline", r"^[A-Za-z]+, [A-Za-z]+ \d{1,2}, \d{4}$", flags=0),
        NoiseRule.pattern(
            "nav_heading",
            r"^#{1,6}\s*\[?(Related Articles|More from Author|Follow us|Top 10|Latest news)\]?",
        ),
        NoiseRule.pattern("table_row", r"^\|.*\|$"),
    ]
    return rules + _shared_rules()


# --- Social posts ---

_SOCIAL_END_MIN_LINES = 3
_SOCIAL_ACTIONS = r"(Like|Comment|Share|Reply|Repost|Send)"


def _social_rules() -> List[NoiseRule]:
    return [
        # The reaction bar always closes the post body.
        NoiseRule.end_marker(
            "reaction_bar_links",
            rf"\[{_SOCIAL_ACTIONS}\]\(.*?\).*?\[{_SOCIAL_ACTIONS}\]",
            min_clean_lines=0,
        ),
        NoiseRule.end_marker(
            "reaction_bar_words",
            rf"^(\[?{_SOCIAL_ACTIONS}\]?(\([^)]*\))?\s*){{2,}}$",
            min_clean_lines=0,
        ),
        NoiseRule.end_marker("add_comment", r"^To view or add a comment", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker("sign_in_more", r"^Sign in to view more", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker("more_comments", r"^See more comments", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker(
            "content_categories", r"^Explore content categories", min_clean_lines=_SOCIAL_END_MIN_LINES
        ),
        NoiseRule.end_marker("welcome_back", r"^Welcome back", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker("new_to_platform", r"^New to LinkedIn", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker("comment_count_link", r"\[\d[\d,]* Comments?\]", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker("comment_count", r"^\d[\d,]*\s+comments?\b", min_clean_lines=_SOCIAL_END_MIN_LINES),
        NoiseRule.end_marker(
            "comment_author",
            rf"^\[[^\]]+\]\([^)]*linkedin\.com/in/[^)]*\)\s*({RELATIVE_TIME})?$",
            min_clean_lines=_SOCIAL_END_MIN_LINES,
        ),
        NoiseRule.exact(
            "social_exact",
            [
                "Like",
                "Comment",
                "Share",
                "Reply",
                "Repost",
                "Send",
                "Copy",
                "Follow",
                "Facebook",
                "X",
                "Twitter",
                "Email",
                "LinkedIn",
                "Report this post",
                "Report this comment",
                "Skip to main content",
                "See more",
                "Show",
                "or",
                # Video player chrome
                "Play Video",
                "Video Player is loading.",
                "Play Back to start",
                "Current Time",
                "Duration",
                "Playback Rate",
                "Show Captions",
                "Mute",
                "Unmute",
                "Fullscreen",
                "Captions",
                "Audio Track",
                "Quality",
                "Auto",
            ],
        ),
        NoiseRule.pattern(
            "share_menu_item", r"^[*\-]\s*(Copy|LinkedIn|Facebook|X|Twitter|Email|Pinterest|Report this comment)$"
        ),
        NoiseRule.pattern(
            "platform_nav_link",
            r"\[(Top Content|People|Learning|Jobs|Games|Report this post|Sign in|Join now|Skip to main content"
            r"|Agree & Join|User Agreement|Privacy Policy|Cookie Policy|View profile|Follow|About|Accessibility"
            r"|Brand Policy|Guest Controls|Community Guidelines|Language|Welcome back|Forgot password"
            r"|New to LinkedIn|Create your free account|Show more|Show less|Explore content categories|LinkedIn)\]",
        ),
        NoiseRule.pattern("platform_boilerplate", r"^(Agree & Join LinkedIn|Skip to main content)"),
        NoiseRule.pattern("post_header", r"^.{1,100}['’]s Post$"),
        NoiseRule.pattern("player_status", r"^(Loaded:|Remaining Time\b|Stream Type\b)"),
        NoiseRule.pattern("player_time", r"^-?\d+:\d+(\s*/\s*\d+:\d+)?$"),
        NoiseRule.pattern("action_link", r"^\[?(Like|Comment|Share|Reply|Copy|Facebook|X)\]?(\([^)]*\))?$"),
        NoiseRule.pattern("author_suffix", r"^[^|]{1,150} \| [^|]{1,80}$"),
        NoiseRule.pattern("language_picker", r"^[A-Za-z]+\s\([A-Za-z]+\)$", flags=0),
        NoiseRule.pattern("see_more", r"^(…|\.\.\.)?\s*(see\s+)?more$"),
        NoiseRule.pattern("report_comment", r"Report this comment"),
    ] + _shared_rules()


GENERIC_FILTER = NoiseFilter("generic", _generic_rules(), tag_cloud_streak=3)
SOCIAL_FILTER = NoiseFilter("social", _social_rules())


def filter_for(site_type: SiteType) -> NoiseFilter:
    return SOCIAL_FILTER if site_type is SiteType.SOCIAL else GENERIC_FILTER


def clean_generic(text: str) -> str:
    return GENERIC_FILTER.clean(text)


def clean_social(text: str) -> str:
    return SOCIAL_FILTER.clean(text)
