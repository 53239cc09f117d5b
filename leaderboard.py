"""
Contributor leaderboard built from merged pull requests on the site repo.

The exported leaderboard.json keeps every author's merge timestamps so the
client can recount them for a time window (?filter=daily|week|month|all).
windowed_leaderboard() is the same recount, used for the server-rendered
all-time table and in tests.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

import github_api
from site_config import SiteConfig

WINDOWS = {
    "daily": 1,
    "week": 7,
    "month": 30,
    "all": 99999,
}
DEFAULT_WINDOW = "all"

log = logging.getLogger("allweneed")


@dataclass
class LeaderboardEntry:
    login: str
    avatar_url: str = ""
    profile_url: str = ""
    count: int = 0
    merged_dates: list[str] = field(default_factory=list)

    def to_json(self) -> dict:
        return {
            "login": self.login,
            "avatar_url": self.avatar_url,
            "profile_url": self.profile_url,
            "count": self.count,
            "merged_dates": list(self.merged_dates),
        }


def parse_timestamp(ts: str) -> datetime:
    dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _sorted(entries: list[LeaderboardEntry]) -> list[LeaderboardEntry]:
    return sorted(entries, key=lambda e: (-e.count, e.login.lower()))


def aggregate_merged_pulls(pulls: list[dict]) -> list[LeaderboardEntry]:
    """Count merged PRs per author, highest count first."""
    by_login: dict[str, LeaderboardEntry] = {}
    for pr in pulls:
        merged_at = pr.get("merged_at")
        user = pr.get("user") or {}
        login = user.get("login") if isinstance(user, dict) else None
        if not merged_at or not login:
            continue
        try:
            if not isinstance(merged_at, str):
                raise TypeError(f"expected a string, got {type(merged_at).__name__}")
            parse_timestamp(merged_at)
        except (TypeError, ValueError):
            log.warning(f"  Ignoring PR #{pr.get('number')} with bad merged_at: {merged_at!r}")
            continue

        entry = by_login.get(login)
        if entry is None:
            entry = by_login[login] = LeaderboardEntry(
                login=login,
                avatar_url=user.get("avatar_url", ""),
                profile_url=user.get("html_url") or f"https://github.com/{login}",
            )
        entry.count += 1
        entry.merged_dates.append(merged_at)

    return _sorted(list(by_login.values()))


def window_days(window: Optional[str]) -> int:
    return WINDOWS.get(window or DEFAULT_WINDOW, WINDOWS[DEFAULT_WINDOW])


def age_in_days(ts: str, now: datetime) -> int:
    delta = abs((now - parse_timestamp(ts)).total_seconds())
    return math.ceil(delta / 86400)


def windowed_leaderboard(entries: list[LeaderboardEntry], window: Optional[str],
                         now: Optional[datetime] = None) -> list[LeaderboardEntry]:
    """Recount merges inside the window; authors with none drop out."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    limit = window_days(window)

    result = []
    for entry in entries:
        count = sum(1 for ts in entry.merged_dates if age_in_days(ts, now) <= limit)
        if count > 0:
            result.append(replace(entry, count=count, merged_dates=list(entry.merged_dates)))
    return _sorted(result)


def build_leaderboard(config: SiteConfig) -> list[LeaderboardEntry]:
    log.info(f"🏆 Fetching merged pull requests for {config.source_repo}...")
    pulls = github_api.fetch_closed_pulls(
        config.source_repo, config.github_token, config.request_timeout, config.pulls_limit
    )
    entries = aggregate_merged_pulls(pulls)
    log.info(f"  {len(entries)} contributors with merged pull requests")
    return entries
