from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

import github_api
import leaderboard
from leaderboard import LeaderboardEntry, aggregate_merged_pulls, windowed_leaderboard

ROOT = Path(__file__).resolve().parents[1]

NOW = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)


def ago(**kwargs) -> str:
    return (NOW - timedelta(**kwargs)).strftime("%Y-%m-%dT%H:%M:%SZ")


def pr(login, merged_at, number=1):
    return {
        "number": number,
        "merged_at": merged_at,
        "user": {"login": login, "avatar_url": f"{login}.png", "html_url": f"https://github.com/{login}"},
    }


def test_aggregate_counts_merged_only():
    pulls = [
        pr("alice", ago(days=1)),
        pr("bob", ago(days=2)),
        pr("alice", ago(days=3)),
        pr("carol", None),  # closed without merge
        pr("alice", ago(days=40)),
        {"number": 9, "merged_at": ago(days=1), "user": None},
    ]
    entries = aggregate_merged_pulls(pulls)

    assert [(e.login, e.count) for e in entries] == [("alice", 3), ("bob", 1)]
    assert entries[0].merged_dates == [ago(days=1), ago(days=3), ago(days=40)]
    assert entries[0].profile_url == "https://github.com/alice"


def test_aggregate_order_is_non_increasing():
    pulls = [pr(login, ago(days=1)) for login in ["a", "b", "b", "c", "c", "c", "d", "b"]]
    counts = [e.count for e in aggregate_merged_pulls(pulls)]
    assert counts == sorted(counts, reverse=True)
    assert sum(counts) == 8


def test_aggregate_skips_bad_timestamps():
    entries = aggregate_merged_pulls([pr("alice", "yesterday"), pr("bob", ago(days=1))])
    assert [e.login for e in entries] == ["bob"]


def test_aggregate_skips_non_string_timestamps():
    pulls = [
        {"number": 3, "merged_at": 1717900000, "user": {"login": "alice"}},
        {"number": 4, "merged_at": ["2024-01-01"], "user": {"login": "carol"}},
        pr("bob", ago(days=1)),
    ]
    entries = aggregate_merged_pulls(pulls)
    assert [e.login for e in entries] == ["bob"]


@pytest.mark.parametrize("window, days", [
    ("daily", 1), ("week", 7), ("month", 30), ("all", 99999),
    ("fortnight", 99999), (None, 99999), ("", 99999),
])
def test_window_days(window, days):
    assert leaderboard.window_days(window) == days


@pytest.mark.parametrize("window", ["toString", "constructor", "__proto__", "hasOwnProperty"])
def test_window_days_ignores_object_builtin_names(window):
    assert leaderboard.window_days(window) == 99999


def test_client_window_lookup_uses_own_keys_only():
    script = (ROOT / "templates" / "search.js").read_text(encoding="utf-8")
    assert "Object.prototype.hasOwnProperty.call(WINDOWS, name)" in script
    assert " in WINDOWS" not in script
    assert "knownWindow(filter) ? WINDOWS[filter] : WINDOWS.all" in script
    assert "knownWindow(params.get('filter'))" in script


@pytest.mark.parametrize("delta, days", [
    (timedelta(0), 0),
    (timedelta(hours=12), 1),
    (timedelta(days=7), 7),
    (timedelta(days=7, hours=1), 8),
])
def test_age_in_days_rounds_up(delta, days):
    ts = (NOW - delta).isoformat()
    assert leaderboard.age_in_days(ts, NOW) == days


def test_windowed_counts():
    entries = [
        LeaderboardEntry("alice", count=4, merged_dates=[
            ago(hours=6), ago(days=3), ago(days=20), ago(days=200),
        ]),
        LeaderboardEntry("bob", count=2, merged_dates=[ago(days=6), ago(days=7)]),
        LeaderboardEntry("carol", count=1, merged_dates=[ago(days=31)]),
    ]

    def counts(window):
        return [(e.login, e.count) for e in windowed_leaderboard(entries, window, NOW)]

    assert counts("daily") == [("alice", 1)]
    assert counts("week") == [("alice", 2), ("bob", 2)]
    assert counts("month") == [("alice", 3), ("bob", 2)]
    assert counts("all") == [("alice", 4), ("bob", 2), ("carol", 1)]
    assert counts("bogus") == counts("all")
    # the input entries are left untouched
    assert entries[0].count == 4


def test_build_leaderboard_degrades_to_empty(config, offline):
    assert leaderboard.build_leaderboard(config) == []


def test_build_leaderboard_uses_source_repo(config, monkeypatch):
    urls = []

    def fake_fetch(url, token="", timeout=10):
        urls.append(url)
        return [pr("alice", ago(days=1)), pr("bob", ago(days=2)), pr("alice", ago(days=5))]

    monkeypatch.setattr(github_api, "fetch_json", fake_fetch)
    entries = leaderboard.build_leaderboard(config)

    assert "/repos/acme/site/pulls" in urls[0]
    assert [(e.login, e.count) for e in entries] == [("alice", 2), ("bob", 1)]
