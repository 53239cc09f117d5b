"""
Turn parsed project files into fully resolved project records.

Logo resolution walks an ordered list of resolvers and keeps the first
non-empty answer:

  1. explicit `logo` from front matter
  2. GitHub owner avatar (github.com links only)
  3. favicon service keyed by the link's domain
  4. bundled placeholder
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional
from urllib.parse import urlparse

import github_api
from content_loader import ParsedProject, slugify_title
from github_api import Contributor
from site_config import SiteConfig

FAVICON_SERVICE = "https://www.google.com/s2/favicons?domain={domain}&sz=128"
PLACEHOLDER_LOGO = "/logo.svg"

log = logging.getLogger("allweneed")


@dataclass
class ProjectRecord:
    title: str
    link: str
    description: str
    slug: str
    page: str
    logo: str
    source_file: str = ""
    tags: list = field(default_factory=list)
    contributors: list[Contributor] = field(default_factory=list)
    content_html: str = ""
    screenshot: str = ""

    def to_json(self) -> dict:
        return {
            "title": self.title,
            "link": self.link,
            "description": self.description,
            "tags": list(self.tags),
            "logo": self.logo,
            "slug": self.slug,
            "page": self.page,
            "contributors": [c.to_json() for c in self.contributors],
        }


# ---------------------------------------------------------------------------
# Logo resolution
# ---------------------------------------------------------------------------

def link_hostname(link: str) -> str:
    try:
        return urlparse(link).hostname or ""
    except ValueError:
        return ""


def explicit_logo(project: ParsedProject, config: SiteConfig) -> Optional[str]:
    return project.logo or None


def github_owner_avatar(project: ParsedProject, config: SiteConfig) -> Optional[str]:
    parsed = github_api.parse_github_link(project.link)
    if not parsed:
        return None
    owner, _ = parsed
    return github_api.fetch_owner_avatar(owner, config.github_token, config.request_timeout)


def favicon_service(project: ParsedProject, config: SiteConfig) -> Optional[str]:
    domain = link_hostname(project.link)
    if not domain:
        return None
    return FAVICON_SERVICE.format(domain=domain)


def placeholder_logo(project: ParsedProject, config: SiteConfig) -> Optional[str]:
    return PLACEHOLDER_LOGO


LOGO_RESOLVERS: list[Callable[[ParsedProject, SiteConfig], Optional[str]]] = [
    explicit_logo,
    github_owner_avatar,
    favicon_service,
    placeholder_logo,
]


def resolve_logo(project: ParsedProject, config: SiteConfig) -> str:
    for resolver in LOGO_RESOLVERS:
        logo = resolver(project, config)
        if logo:
            return logo
    return PLACEHOLDER_LOGO


# ---------------------------------------------------------------------------
# Contributors & records
# ---------------------------------------------------------------------------

def fetch_project_contributors(link: str, config: SiteConfig) -> list[Contributor]:
    parsed = github_api.parse_github_link(link)
    if not parsed or not parsed[1]:
        return []
    owner, repo = parsed
    return github_api.fetch_contributors(
        owner, repo, config.github_token, config.request_timeout, config.contributors_limit
    )


def build_project_record(project: ParsedProject, config: SiteConfig) -> ProjectRecord:
    slug = slugify_title(project.title) or slugify_title(project.source_file.rsplit(".", 1)[0])
    return ProjectRecord(
        title=project.title,
        link=project.link,
        description=project.description,
        slug=slug,
        page=f"/projects/{slug}.html",
        logo=resolve_logo(project, config),
        source_file=project.source_file,
        tags=list(project.tags),
        contributors=fetch_project_contributors(project.link, config),
        content_html=project.content_html,
        screenshot=project.screenshot,
    )


def enrich_projects(projects: list[ParsedProject], config: SiteConfig) -> list[ProjectRecord]:
    """Resolve each project in turn; network calls happen one project at a time."""
    records = []
    for project in projects:
        log.info(f"🔄 Processing: {project.title}")
        records.append(build_project_record(project, config))
    return records
