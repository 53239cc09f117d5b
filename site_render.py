"""HTML, JSON, sitemap and robots rendering for the generated site."""

import html
import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from typing import Optional

from enrichment import ProjectRecord, link_hostname
from leaderboard import WINDOWS, LeaderboardEntry
from site_config import SiteConfig

OTHER_CATEGORY = "Other"
FUSE_CDN = "https://cdn.jsdelivr.net/npm/fuse.js@6.6.2/dist/fuse.min.js"
SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
WINDOW_LABELS = {
    "daily": "Today",
    "week": "This week",
    "month": "This month",
    "all": "All time",
}


def esc(value) -> str:
    return html.escape(str(value or ""), quote=True)


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def render_layout(title: str, description: str, body: str, canonical: str,
                  config: SiteConfig, additional_head: str = "") -> str:
    repo_url = esc(config.repo_url)
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width,initial-scale=1" />
  <title>{esc(title)}</title>
  <meta name="description" content="{esc(description)}" />
  <link rel="canonical" href="{esc(canonical)}" />
  <meta name="robots" content="index,follow" />

  <meta property="og:title" content="{esc(title)}" />
  <meta property="og:description" content="{esc(description)}" />
  <meta property="og:url" content="{esc(canonical)}" />
  <meta property="og:type" content="website" />
  <meta property="og:site_name" content="{esc(config.site_name)}" />
  <meta name="twitter:card" content="summary_large_image" />
  <meta name="twitter:title" content="{esc(title)}" />
  <meta name="twitter:description" content="{esc(description)}" />

  <link rel="icon" href="/logo.svg" />
  <meta name="theme-color" content="#0b6efd" />
  <link rel="stylesheet" href="/styles.css" />
  {additional_head}
</head>
<body>
<header class="site-header" id="header">
  <div class="header-content">
    <a class="brand" href="/"><img src="/logo.svg" alt="{esc(config.site_name)}" /> <span>{esc(config.site_name)}</span></a>
    <nav class="nav-links">
      <a href="/">Home</a>
      <a href="/projects/">Projects</a>
      <a href="/leaderboard.html">Leaderboard</a>
      <a href="{repo_url}">GitHub</a>
    </nav>
    <button class="search-icon-btn hidden" id="headerSearchBtn" aria-label="Search">&#128269;</button>
  </div>
</header>
<main class="container">
{body}
</main>
<footer class="site-footer">
  <div class="footer-content">
    <div>
      <p>MIT License &middot; Open source</p>
      <p>Auto-generated from the <a href="{repo_url}">GitHub repository</a></p>
    </div>
    <div class="footer-links">
      <a href="/sitemap.xml">Sitemap</a>
      <a href="{repo_url}/blob/main/CONTRIBUTING.md">Contribute</a>
    </div>
  </div>
</footer>
<script src="{FUSE_CDN}"></script>
<script src="/search.js"></script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Cards & categories
# ---------------------------------------------------------------------------

def project_card_html(p: ProjectRecord) -> str:
    logo_tag = (
        f'<img class="project-logo" src="{esc(p.logo)}" alt="{esc(p.title)} logo" loading="lazy" />'
        if p.logo else '<div class="project-logo placeholder"></div>'
    )
    contributors_html = " ".join(
        f'<a class="contrib" href="{esc(c.profile_url)}" target="_blank" rel="noopener" '
        f'title="{esc(c.login)}">{esc(c.login)}</a>'
        for c in p.contributors[:4]
    )
    tags_html = "".join(f'<span class="tag">{esc(tag)}</span>' for tag in p.tags[:3])
    contributors_span = (
        f'<span class="contributors">{contributors_html}</span>' if contributors_html else ""
    )

    return f"""<article class="project-card" data-slug="{esc(p.slug)}" data-tags="{esc(' '.join(p.tags))}">
    <a class="project-link" href="{esc(p.page)}" aria-label="View {esc(p.title)} details">
      <div class="project-left">{logo_tag}</div>
      <div class="project-body">
        <h3>{esc(p.title)}</h3>
        <p class="desc">{esc(p.description)}</p>
        <div class="tags">{tags_html}</div>
        <div class="meta">
          <span class="site-link">{esc(link_hostname(p.link) or p.link)}</span>
          {contributors_span}
        </div>
      </div>
    </a>
  </article>"""


def group_by_category(projects: list[ProjectRecord]) -> list[tuple[str, list[ProjectRecord]]]:
    """Projects grouped by tag, largest group first. Untagged ones go under Other."""
    categories: dict[str, list[ProjectRecord]] = {}
    for p in projects:
        for tag in (p.tags or [OTHER_CATEGORY]):
            categories.setdefault(tag, []).append(p)
    return sorted(categories.items(), key=lambda item: -len(item[1]))


def count_contributors(projects: list[ProjectRecord]) -> int:
    return len({c.login for p in projects for c in p.contributors})


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------

def collapse_css(visible: int) -> str:
    """Hide cards past `visible` in collapsed categories; matches the Show all cutoff."""
    return (f"<style>.projects-grid.limited .project-card:nth-child(n + {visible + 1}) "
            f"{{ display: none; }}</style>")


def render_homepage(projects: list[ProjectRecord], config: SiteConfig,
                    categories: Optional[list] = None) -> str:
    if categories is None:
        categories = group_by_category(projects)

    sections = []
    for tag, items in categories:
        cards = "\n".join(project_card_html(p) for p in items)
        collapsible = len(items) > config.category_collapse_at
        show_more = (
            f'<button class="show-more" data-category="{esc(tag)}">Show all</button>'
            if collapsible else ""
        )
        sections.append(f"""
      <section class="category" data-category="{esc(tag)}">
        <div class="category-header">
          <h2>{esc(tag)} <span class="count">({len(items)})</span></h2>
          {show_more}
        </div>
        <div class="projects-grid{' limited' if collapsible else ''}" data-category-grid="{esc(tag)}">
          {cards}
        </div>
      </section>""")

    body = f"""
    <section class="hero" id="hero">
      <h1>{esc(config.site_name)}</h1>
      <p class="lead">Discover developer tools, hidden gems, and useful resources curated by the community.</p>
      <div class="search-container">
        <input id="searchInput" type="search" placeholder="Search what you are looking for..." autocomplete="off" />
      </div>
      <div class="stats">
        <div class="stat"><span class="stat-number">{len(projects)}</span><span class="stat-label">Projects</span></div>
        <div class="stat"><span class="stat-number">{len(categories)}</span><span class="stat-label">Categories</span></div>
        <div class="stat"><span class="stat-number">{count_contributors(projects)}</span><span class="stat-label">Contributors</span></div>
      </div>
    </section>

    <div id="projects">
      {''.join(sections)}
    </div>

    <div id="no-results" class="no-results hidden">
      <h3>No projects found</h3>
      <p>Try different keywords or browse the categories.</p>
    </div>
"""
    return render_layout(
        f"{config.site_name} · Developer Tools & Hidden Gems",
        "Discover developer tools, hidden gems, and useful resources curated by the community.",
        body,
        f"{config.site_url}/",
        config,
        additional_head=collapse_css(config.category_collapse_at),
    )


def render_project_page(p: ProjectRecord, config: SiteConfig) -> str:
    source_btn = (
        f'<a class="cta-secondary" href="{esc(p.link)}" target="_blank" rel="noopener">View Source</a>'
        if "github.com" in link_hostname(p.link) else ""
    )
    tags_html = ""
    if p.tags:
        tags_html = '<div class="project-tags">' + "".join(
            f'<span class="tag">{esc(tag)}</span>' for tag in p.tags
        ) + "</div>"

    contributors_html = ""
    if p.contributors:
        items = "".join(
            f'<a href="{esc(c.profile_url)}" target="_blank" rel="noopener" class="contributor">'
            f'<img src="{esc(c.avatar_url)}" alt="{esc(c.login)}" loading="lazy" />'
            f"<span>{esc(c.login)}</span></a>"
            for c in p.contributors
        )
        contributors_html = f"""<div class="contributors-section">
              <h3>Contributors</h3>
              <div class="contributors-list">{items}</div>
            </div>"""

    screenshot_html = (
        f'<figure class="project-screenshot"><img src="{esc(p.screenshot)}" '
        f'alt="{esc(p.title)} screenshot" loading="lazy" /></figure>'
        if p.screenshot else ""
    )
    content_html = (
        f'<section class="project-content">\n{p.content_html}\n</section>'
        if p.content_html.strip() else ""
    )

    body = f"""
    <article class="project-full">
      <header class="project-header">
        <img class="project-header-logo" src="{esc(p.logo)}" alt="{esc(p.title)} logo" />
        <div class="project-info">
          <h1>{esc(p.title)}</h1>
          <p class="project-description">{esc(p.description)}</p>
          <div class="project-actions">
            <a class="cta-primary" href="{esc(p.link)}" target="_blank" rel="noopener">Visit Project</a>
            {source_btn}
          </div>
          {tags_html}
          {contributors_html}
        </div>
      </header>
      {screenshot_html}
      {content_html}
      <div class="back-to-home"><a href="/">&larr; Back to all projects</a></div>
    </article>
"""
    return render_layout(
        f"{p.title} · {config.site_name}", p.description, body,
        f"{config.site_url}{p.page}", config,
    )


def render_listing_page(projects: list[ProjectRecord], config: SiteConfig) -> str:
    cards = "\n".join(project_card_html(p) for p in projects)
    body = f"""
    <h1>All Projects</h1>
    <p>Browse the complete collection of {len(projects)} developer tools and resources.</p>
    <div class="projects-grid">
      {cards}
    </div>
"""
    return render_layout(
        f"All Projects · {config.site_name}", "Browse all projects", body,
        f"{config.site_url}/projects/", config,
    )


def leaderboard_rows_html(entries: list[LeaderboardEntry]) -> str:
    if not entries:
        return '<tr><td colspan="3" class="empty">No active contributors in this period.</td></tr>'
    return "\n".join(
        f"""<tr>
          <td class="rank">#{i}</td>
          <td class="who"><img src="{esc(e.avatar_url)}" alt="" loading="lazy" />
            <a href="{esc(e.profile_url)}" target="_blank" rel="noopener">{esc(e.login)}</a></td>
          <td class="count">{e.count}</td>
        </tr>"""
        for i, e in enumerate(entries, 1)
    )


def render_leaderboard_page(entries: list[LeaderboardEntry], config: SiteConfig) -> str:
    filters = "".join(
        f'<a class="filter-btn" data-filter="{name}" href="?filter={name}">{WINDOW_LABELS[name]}</a>'
        for name in WINDOWS
    )
    body = f"""
    <section class="leaderboard">
      <h1>Leaderboard</h1>
      <p>Contributors ranked by merged pull requests to <a href="{esc(config.repo_url)}">{esc(config.source_repo)}</a>.</p>
      <nav class="filters" id="leaderboard-filters">{filters}</nav>
      <table class="leaderboard-table">
        <thead><tr><th>Rank</th><th>Contributor</th><th>Merged PRs</th></tr></thead>
        <tbody id="leaderboard-body">
        {leaderboard_rows_html(entries)}
        </tbody>
      </table>
    </section>
"""
    return render_layout(
        f"Leaderboard · {config.site_name}", "Top contributors by merged pull requests", body,
        f"{config.site_url}/leaderboard.html", config,
    )


# ---------------------------------------------------------------------------
# Data exports
# ---------------------------------------------------------------------------

def projects_json(projects: list[ProjectRecord]) -> list[dict]:
    return [p.to_json() for p in projects]


def leaderboard_json(entries: list[LeaderboardEntry]) -> list[dict]:
    return [e.to_json() for e in entries]


def render_sitemap(projects: list[ProjectRecord], config: SiteConfig,
                   lastmod: Optional[datetime] = None) -> str:
    lastmod = (lastmod or datetime.now(timezone.utc)).isoformat()
    urlset = ET.Element("urlset", xmlns=SITEMAP_NS)

    seen: set[str] = set()

    def add_url(loc: str, priority: str):
        if loc in seen:
            return
        seen.add(loc)
        url = ET.SubElement(urlset, "url")
        ET.SubElement(url, "loc").text = loc
        ET.SubElement(url, "lastmod").text = lastmod
        ET.SubElement(url, "priority").text = priority

    add_url(f"{config.site_url}/", "1.0")
    add_url(f"{config.site_url}/projects/", "0.8")
    add_url(f"{config.site_url}/leaderboard.html", "0.6")
    for p in projects:
        add_url(f"{config.site_url}{p.page}", "0.7")

    ET.indent(urlset)
    return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(urlset, encoding="unicode") + "\n"


def render_robots(config: SiteConfig) -> str:
    return f"""User-agent: *
Allow: /

Sitemap: {config.site_url}/sitemap.xml

Crawl-delay: 1
"""
