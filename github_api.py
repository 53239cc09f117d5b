"""
Thin GitHub REST API helpers.

Every call is best effort: a failed request of any kind is logged and turns
into None (or an empty list) so the build keeps going.
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests

API_BASE = "https://api.github.com"
GITHUB_HOSTS = {"github.com", "www.github.com"}
USER_AGENT = "allweneed-site-generator/1.0"

log = logging.getLogger("allweneed")


@dataclass
class Contributor:
    login: str
    avatar_url: str = ""
    profile_url: str = ""
    contributions: Optional[int] = None

    def to_json(self) -> dict:
        return {
            "login": self.login,
            "avatar_url": self.avatar_url,
            "profile_url": self.profile_url,
        }


def github_headers(token: str = "") -> dict:
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


def fetch_json(url: str, token: str = "", timeout: float = 10):
    """GET a JSON document. Returns None on any failure."""
    try:
        resp = requests.get(url, headers=github_headers(token), timeout=timeout)
        if resp.status_code == 403 and resp.headers.get("X-RateLimit-Remaining") == "0":
            log.warning(f"  GitHub rate limit hit for {url} (set GITHUB_TOKEN to raise it)")
            return None
        if not resp.ok:
            log.warning(f"  GitHub API {resp.status_code} for {url}")
            return None
        return resp.json()
    except requests.RequestException as e:
        log.warning(f"  Request failed for {url}: {e}")
        return None
    except ValueError as e:
        log.warning(f"  Malformed JSON from {url}: {e}")
        return None


def parse_github_link(link: str) -> Optional[tuple[str, Optional[str]]]:
    """Return (owner, repo) for a github.com link, repo is None for account links."""
    try:
        u = urlparse(link)
    except ValueError:
        return None
    if (u.hostname or "").lower() not in GITHUB_HOSTS:
        return None

    parts = [p for p in u.path.split("/") if p]
    if not parts:
        return None
    owner = parts[0]
    repo = parts[1] if len(parts) >= 2 else None
    if repo and repo.endswith(".git"):
        repo = repo[:-4]
    return owner, repo or None


def fetch_owner_avatar(owner: str, token: str = "", timeout: float = 10) -> Optional[str]:
    data = fetch_json(f"{API_BASE}/users/{owner}", token, timeout)
    if isinstance(data, dict) and data.get("avatar_url"):
        return data["avatar_url"]
    return None


def fetch_contributors(owner: str, repo: str, token: str = "",
                       timeout: float = 10, limit: int = 10) -> list[Contributor]:
    """Top contributors of a repository, in the order GitHub ranks them."""
    url = f"{API_BASE}/repos/{owner}/{repo}/contributors?per_page={limit}"
    data = fetch_json(url, token, timeout)
    if not isinstance(data, list):
        return []

    contributors = []
    for item in data[:limit]:
        if not isinstance(item, dict) or not item.get("login"):
            continue
        login = item["login"]
        contributors.append(Contributor(
            login=login,
            avatar_url=item.get("avatar_url", ""),
            profile_url=item.get("html_url") or f"https://github.com/{login}",
            contributions=item.get("contributions"),
        ))
    return contributors


def fetch_closed_pulls(source_repo: str, token: str = "",
                       timeout: float = 10, limit: int = 100) -> list[dict]:
    """Most recently updated closed pull requests of the site's own repo."""
    url = (f"{API_BASE}/repos/{source_repo}/pulls"
           f"?state=closed&per_page={limit}&sort=updated&direction=desc")
    data = fetch_json(url, token, timeout)
    if not isinstance(data, list):
        return []
    return [pr for pr in data if isinstance(pr, dict)]
