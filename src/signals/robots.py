"""robots.txt parsing and AI crawler directive evaluation."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlparse

from src.models.content import AI_BOTS, BotDirective, CrawledRobots


@dataclass
class _RobotsGroup:
    agents: list[str]
    rules: list[tuple[str, str]]


def _parse_robots_txt(text: str) -> tuple[list[_RobotsGroup], list[str]]:
    """Split robots.txt into user-agent groups and collect Sitemap lines."""
    groups: list[_RobotsGroup] = []
    sitemaps: list[str] = []
    current_agents: list[str] = []
    current_rules: list[tuple[str, str]] = []

    def _flush():
        if current_agents or current_rules:
            groups.append(_RobotsGroup(current_agents[:], current_rules[:]))
            current_agents.clear()
            current_rules.clear()

    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        if ":" not in line:
            continue
        key, value = [part.strip() for part in line.split(":", 1)]
        key_lower = key.lower()
        if key_lower == "user-agent":
            if current_rules:
                _flush()
            current_agents.append(value.lower())
        elif key_lower in {"allow", "disallow"}:
            current_rules.append((key_lower, value))
        elif key_lower == "sitemap" and value:
            sitemaps.append(value)
    _flush()
    return groups, sitemaps


def _groups_for(groups: Iterable[_RobotsGroup], agent: str) -> list[_RobotsGroup]:
    """Groups naming the agent, else the wildcard groups."""
    agent = agent.lower()
    groups = list(groups)
    named = [group for group in groups if agent in group.agents]
    return named or [group for group in groups if "*" in group.agents]


def _directive_for_path(groups: Iterable[_RobotsGroup], path: str) -> BotDirective:
    """Longest matching rule wins; Allow wins ties. An empty Disallow allows everything."""
    verdict: BotDirective = "unspecified"
    longest = -1
    for group in groups:
        for rule, rule_path in group.rules:
            if not rule_path:
                if rule == "disallow" and longest < 0:
                    verdict, longest = "allowed", 0
                continue
            if not path.startswith(rule_path):
                continue
            length = len(rule_path)
            if length > longest or (length == longest and rule == "allow"):
                verdict = "allowed" if rule == "allow" else "disallowed"
                longest = length
    return verdict


def evaluate_ai_bots(robots_txt: str, page_url: str) -> dict[str, BotDirective]:
    """Evaluate robots.txt for each tracked AI crawler at the page's path."""
    groups, _ = _parse_robots_txt(robots_txt)
    path = urlparse(page_url).path or "/"
    return {bot: _directive_for_path(_groups_for(groups, bot), path) for bot in AI_BOTS}


def build_robots_policy(robots_txt: str | None, page_url: str, x_robots_tag: str = "") -> CrawledRobots:
    """Build the crawled robots policy.

    Args:
        robots_txt: Body of /robots.txt, or None when it could not be fetched
        page_url: Final URL of the analysed page
        x_robots_tag: X-Robots-Tag response header value
    """
    if robots_txt is None:
        return CrawledRobots(has_robots_txt=False, x_robots_tag=x_robots_tag)

    groups, sitemaps = _parse_robots_txt(robots_txt)
    directives = evaluate_ai_bots(robots_txt, page_url)
    wildcard = [group for group in groups if "*" in group.agents]
    wildcard_root = _directive_for_path(wildcard, "/")
    tracked = {bot.lower() for bot in AI_BOTS}

    return CrawledRobots(
        has_robots_txt=True,
        allows_all_bots=(
            wildcard_root != "disallowed"
            and all(value != "disallowed" for value in directives.values())
        ),
        has_specific_bot_rules=any(agent in tracked for group in groups for agent in group.agents),
        sitemap_declared=bool(sitemaps),
        sitemaps=sitemaps,
        ai_bot_directives=directives,
        x_robots_tag=x_robots_tag,
    )
