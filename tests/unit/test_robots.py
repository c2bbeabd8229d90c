"""Unit tests for robots.txt evaluation."""
from __future__ import annotations

import pytest

from src.models.content import AI_BOTS
from src.signals.robots import build_robots_policy, evaluate_ai_bots

PAGE = "https://example.com/blog/post"


class TestEvaluateAIBots:
    """Tests for per-bot directive evaluation."""

    def test_blocked_bots(self, robots_txt_block_ai):
        """Bots with their own Disallow group are blocked; others fall back to *."""
        directives = evaluate_ai_bots(robots_txt_block_ai, PAGE)
        assert directives["GPTBot"] == "disallowed"
        assert directives["CCBot"] == "disallowed"
        assert directives["PerplexityBot"] == "disallowed"
        assert directives["Google-Extended"] == "allowed"
        assert directives["Bingbot"] == "allowed"

    def test_all_seven_bots_reported(self, robots_txt_allow_all):
        """Every tracked bot gets a directive."""
        assert list(evaluate_ai_bots(robots_txt_allow_all, PAGE)) == list(AI_BOTS)

    def test_empty_file(self):
        """An empty robots.txt specifies nothing."""
        assert set(evaluate_ai_bots("", PAGE).values()) == {"unspecified"}

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/private/public/page", "allowed"),
            ("/private/secret", "disallowed"),
            ("/blog", "unspecified"),
        ],
    )
    def test_longest_match_wins(self, path, expected):
        """The most specific matching rule decides."""
        robots = "User-agent: *\nDisallow: /private\nAllow: /private/public\n"
        assert evaluate_ai_bots(robots, f"https://example.com{path}")["GPTBot"] == expected

    def test_allow_wins_ties(self):
        """Allow wins when Allow and Disallow are equally specific."""
        robots = "User-agent: GPTBot\nDisallow: /docs\nAllow: /docs\n"
        assert evaluate_ai_bots(robots, "https://example.com/docs/a")["GPTBot"] == "allowed"

    def test_empty_disallow_allows(self):
        """An empty Disallow line allows everything."""
        robots = "User-agent: GPTBot\nDisallow:\n"
        assert evaluate_ai_bots(robots, PAGE)["GPTBot"] == "allowed"

    def test_agent_match_is_case_insensitive(self):
        """User-agent names match regardless of case."""
        robots = "User-agent: gptbot\nDisallow: /\n"
        assert evaluate_ai_bots(robots, PAGE)["GPTBot"] == "disallowed"

    def test_grouped_agents(self):
        """Consecutive User-agent lines share the following rules."""
        robots = "User-agent: GPTBot\nUser-agent: CCBot\nDisallow: /\n"
        directives = evaluate_ai_bots(robots, PAGE)
        assert directives["GPTBot"] == "disallowed"
        assert directives["CCBot"] == "disallowed"
        assert directives["Bingbot"] == "unspecified"

    def test_repeated_agent_groups_merge(self):
        """Rules from every group naming a bot are combined; * no longer applies."""
        robots = (
            "User-agent: GPTBot\nDisallow: /blog\n\n"
            "User-agent: *\nDisallow: /\n\n"
            "User-agent: GPTBot\nAllow: /blog/post\n"
        )
        assert evaluate_ai_bots(robots, PAGE)["GPTBot"] == "allowed"
        assert evaluate_ai_bots(robots, "https://example.com/blog/other")["GPTBot"] == "disallowed"
        assert evaluate_ai_bots(robots, "https://example.com/shop")["GPTBot"] == "unspecified"
        assert evaluate_ai_bots(robots, PAGE)["CCBot"] == "disallowed"

    def test_comments_ignored(self):
        """Comments are stripped before parsing."""
        robots = "# robots\nUser-agent: * # everyone\nDisallow: /blog # no blog\n"
        assert evaluate_ai_bots(robots, PAGE)["GPTBot"] == "disallowed"


class TestBuildRobotsPolicy:
    """Tests for the crawled robots policy."""

    def test_missing_robots_txt(self):
        """A missing file yields the permissive default policy."""
        policy = build_robots_policy(None, PAGE, x_robots_tag="noindex")
        assert policy.source == "crawled"
        assert policy.has_robots_txt is False
        assert policy.allows_all_bots is True
        assert set(policy.ai_bot_directives.values()) == {"unspecified"}
        assert policy.x_robots_tag == "noindex"

    def test_blocking_policy(self, robots_txt_block_ai):
        """Blocking AI bots is reflected in the summary flags."""
        policy = build_robots_policy(robots_txt_block_ai, PAGE)
        assert policy.has_robots_txt is True
        assert policy.allows_all_bots is False
        assert policy.has_specific_bot_rules is True
        assert policy.sitemap_declared is False

    def test_allow_all_with_sitemap(self, robots_txt_allow_all):
        """Sitemap lines are collected."""
        policy = build_robots_policy(robots_txt_allow_all, PAGE)
        assert policy.allows_all_bots is True
        assert policy.sitemap_declared is True
        assert policy.sitemaps == ["https://example.com/sitemap.xml"]

    def test_wildcard_disallow_root(self):
        """Disallowing / for everyone blocks every bot."""
        policy = build_robots_policy("User-agent: *\nDisallow: /\n", PAGE)
        assert policy.allows_all_bots is False
        assert policy.has_specific_bot_rules is False
        assert set(policy.ai_bot_directives.values()) == {"disallowed"}
