"""
Unit tests for the generic and social line filters.
"""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from textquarry.extractor.models import SiteType
from textquarry.extractor.noise_filters import (
    GENERIC_FILTER,
    SOCIAL_FILTER,
    NoiseFilter,
    NoiseRule,
    RuleKind,
    clean_generic,
    clean_social,
    filter_for,
    is_short_line,
    pure_link_bullet,
    too_many_links,
)

CONTENT_LINES = [
    "This article explains the new deployment process, which took six months.",
    "We rolled out the change to every region, one cluster at a time.",
    "The migration finished ahead of schedule and under budget.",
    "Most of the work went into testing the rollback path.",
    "Each team owned its own cutover date and communication plan.",
    "Monitoring dashboards were reviewed before every single step.",
    "In the end, the platform handled twice the traffic with fewer incidents.",
]

NOISE_LINES = [
    "Share this post",
    "Search",
    "Menu",
    "Subscribe",
    "Like",
    "Comment",
    "Share",
    "Copy",
    "2w",
    "4d",
    "1mo",
    "1,234 followers",
    "![hero](https://example.com/hero.png)",
    "Title: Deploying at Scale",
    "URL Source: https://example.com/post",
    "Markdown Content:",
    "---",
    "[One](https://a) [Two](https://b) [Three](https://c)",
    "* [Home](https://example.com/)",
    "## Related Articles",
    "Comments",
    "Copyright 2024 Example Corp",
    "[Like](https://x)[Comment](https://y)",
    "To view or add a comment, sign in",
    "[Jane Doe](https://www.linkedin.com/in/janedoe) 3d",
    "Jane Doe's Post",
    "Play Video",
    "0:42 / 3:10",
    "Great launch [#AI](https://x.com/tag/ai) [#ML](https://x.com/tag/ml) today",
    "Python",
    "Rust",
    "Go",
    "Kotlin",
]

line_strategy = st.one_of(
    st.sampled_from(CONTENT_LINES),
    st.sampled_from(NOISE_LINES),
    st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=60),
)
document_strategy = st.lists(line_strategy, max_size=30).map("\n".join)


class TestGenericFilter:
    """Blog and news page filtering."""

    def test_share_line_removed_content_kept(self):
        text = "Share this post\nThis article explains the new deployment process, which took six months."
        assert clean_generic(text) == (
            "This article explains the new deployment process, which took six months."
        )

    def test_lines_joined_as_paragraphs(self):
        text = "\n".join(CONTENT_LINES[:2])
        assert clean_generic(text) == f"{CONTENT_LINES[0]}\n\n{CONTENT_LINES[1]}"

    def test_end_marker_discards_remainder(self):
        text = "\n".join(CONTENT_LINES[:6] + ["## Related Articles", "A trailing teaser that must not survive."])
        cleaned = clean_generic(text)
        assert CONTENT_LINES[5] in cleaned
        assert "trailing teaser" not in cleaned
        assert "Related Articles" not in cleaned

    def test_early_end_marker_is_dropped_not_terminal(self):
        text = "\n".join(["Comments", CONTENT_LINES[0], CONTENT_LINES[1]])
        assert clean_generic(text) == f"{CONTENT_LINES[0]}\n\n{CONTENT_LINES[1]}"

    def test_copyright_line_ends_document(self):
        text = "\n".join(CONTENT_LINES[:6] + ["© 2024 Example Corp", "Footer sentence that should be gone."])
        assert "Footer sentence" not in clean_generic(text)

    def test_markdown_images_and_proxy_headers_removed(self):
        text = "\n".join(
            [
                "Title: Deploying at Scale",
                "URL Source: https://example.com/post",
                "Markdown Content:",
                "![hero](https://example.com/hero.png)",
                "[![logo](https://example.com/logo.png)](https://example.com)",
                CONTENT_LINES[0],
            ]
        )
        assert clean_generic(text) == CONTENT_LINES[0]

    def test_navigation_line_with_many_links_removed(self):
        text = "[Home](/) [Blog](/blog) [About](/about)\n" + CONTENT_LINES[0]
        assert clean_generic(text) == CONTENT_LINES[0]

    def test_pure_link_bullet_removed(self):
        text = "* [Deploying with confidence](https://example.com/older-post)\n" + CONTENT_LINES[0]
        assert clean_generic(text) == CONTENT_LINES[0]

    def test_tag_cloud_streak_truncated(self):
        text = "\n".join([CONTENT_LINES[0], "Python", "Rust", "Go", "Kotlin", "Swift", CONTENT_LINES[1], "Elixir"])
        assert clean_generic(text).split("\n\n") == [
            CONTENT_LINES[0],
            "Python",
            "Rust",
            "Go",
            CONTENT_LINES[1],
            "Elixir",
        ]

    def test_short_sentences_do_not_count_towards_streak(self):
        lines = ["It works.", "Really!", "Why?", "Because:", "Yes."]
        assert clean_generic("\n".join(lines)).split("\n\n") == lines


class TestSocialFilter:
    """Social feed post filtering."""

    def test_reaction_bar_drops_everything_after_it(self):
        trailing = [f"Trailing line number {i} with some ordinary words in it." for i in range(10)]
        text = "\n".join(
            [
                "Our team shipped the new onboarding flow this week, and early feedback has been great.",
                "[Like](https://www.linkedin.com/like)[Comment](https://www.linkedin.com/comment)",
                *trailing,
            ]
        )
        cleaned = clean_social(text)
        assert cleaned == "Our team shipped the new onboarding flow this week, and early feedback has been great."
        for line in trailing:
            assert line not in cleaned

    def test_reaction_bar_as_first_line_still_terminates(self):
        trailing = [f"Trailing line number {i} with some ordinary words in it." for i in range(10)]
        text = "\n".join(["[Like](https://x)[Comment](https://y)", *trailing])
        assert clean_social(text) == ""

    def test_hashtag_links_become_plain_hashtags(self):
        text = "Great launch [#AI](https://x.com/tag/ai) [#ML](https://x.com/tag/ml) today"
        assert clean_social(text) == "Great launch #AI #ML today"

    def test_hashtags_do_not_count_as_links(self):
        text = "Big news [#a](https://u/a) [#b](https://u/b) [#c](https://u/c) for everyone here"
        assert clean_social(text) == "Big news #a #b #c for everyone here"

    def test_comment_author_ends_post_after_content(self):
        text = "\n".join(
            CONTENT_LINES[:3]
            + ["[Jane Doe](https://www.linkedin.com/in/janedoe) 3d", "What a great write-up, thanks for sharing!"]
        )
        cleaned = clean_social(text)
        assert CONTENT_LINES[2] in cleaned
        assert "great write-up" not in cleaned

    @pytest.mark.parametrize(
        "line",
        [
            "2w",
            "4d",
            "1mo",
            "1,234 followers",
            "56 reactions",
            "Jane Doe's Post",
            "Play Video",
            "0:42 / 3:10",
            "Loaded: 100.00%",
            "Report this post",
            "* Copy",
            "[Sign in](https://www.linkedin.com/login)",
        ],
    )
    def test_platform_chrome_removed(self, line):
        assert SOCIAL_FILTER.is_noise(line)
        assert clean_social(f"{line}\n{CONTENT_LINES[0]}") == CONTENT_LINES[0]


class TestHeuristics:
    def test_too_many_links(self):
        assert too_many_links("[a](1) [b](2) [c](3)")
        assert not too_many_links("[a](1) and [b](2)")

    def test_pure_link_bullet(self):
        assert pure_link_bullet("- [Older post](https://example.com/older)")
        assert not pure_link_bullet("- [Older post](https://example.com/older) is worth reading")
        assert not pure_link_bullet("- [" + "x" * 120 + "](https://example.com)")

    def test_is_short_line(self):
        assert is_short_line("Machine learning")
        assert not is_short_line("Done.")
        assert not is_short_line("This line has five words")


class TestNoiseFilterEngine:
    def test_rules_sorted_by_precedence(self):
        noise_filter = NoiseFilter(
            "test",
            [
                NoiseRule.heuristic("h", lambda line: False),
                NoiseRule.pattern("p", r"^x"),
                NoiseRule.end_marker("e", r"^end", min_clean_lines=0),
                NoiseRule.exact("x", ["y"]),
            ],
        )
        assert [rule.kind for rule in noise_filter.rules] == [
            RuleKind.END_MARKER,
            RuleKind.EXACT,
            RuleKind.PATTERN,
            RuleKind.HEURISTIC,
        ]

    def test_end_marker_wins_over_exact(self):
        noise_filter = NoiseFilter(
            "test",
            [NoiseRule.exact("stop_exact", ["stop"]), NoiseRule.end_marker("stop", r"^stop$", min_clean_lines=1)],
        )
        assert noise_filter.clean("keep me\nstop\nnever seen") == "keep me"

    def test_exact_match_is_case_insensitive(self):
        assert GENERIC_FILTER.is_noise("  SHARE THIS POST  ")

    def test_filter_for_site_type(self):
        assert filter_for(SiteType.GENERIC) is GENERIC_FILTER
        assert filter_for(SiteType.SOCIAL) is SOCIAL_FILTER


class TestFilterProperties:
    """Properties that hold for every input."""

    @given(document_strategy)
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_generic_is_idempotent(self, text):
        once = clean_generic(text)
        assert clean_generic(once) == once

    @given(document_strategy)
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_social_is_idempotent(self, text):
        once = clean_social(text)
        assert clean_social(once) == once

    @given(document_strategy, st.sampled_from([GENERIC_FILTER, SOCIAL_FILTER]))
    @settings(max_examples=200, suppress_health_check=[HealthCheck.too_slow])
    def test_no_surviving_line_matches_a_rule(self, text, noise_filter):
        for line in noise_filter.clean(text).split("\n\n"):
            if line:
                assert noise_filter.first_match(line) is None, line
