#!/usr/bin/env python3
"""
all_we_need Site Generator
==========================
Reads projects/*.md, enriches each project through the GitHub API (logo,
contributors), builds a merged-PR leaderboard for the site repository and
writes a static site into docs/ for GitHub Pages.

Usage:
    python generate_site.py
    python generate_site.py --out-dir site --site-url https://example.org

Configuration via environment variables or .env file (see site_config.py).
"""

import argparse
import json
import logging
import shutil
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import content_loader
import enrichment
import leaderboard
import site_render
from enrichment import ProjectRecord
from leaderboard import LeaderboardEntry
from site_config import SiteConfig, setup_logging

TEMPLATE_FILES = ["styles.css", "logo.svg", "search.js"]

log = logging.getLogger("allweneed")


@dataclass
class BuildResult:
    out_dir: Path
    projects: list[ProjectRecord] = field(default_factory=list)
    leaderboard: list[LeaderboardEntry] = field(default_factory=list)
    categories: list = field(default_factory=list)


# ---------------------------------------------------------------------------
# Output directory
# ---------------------------------------------------------------------------

def prepare_output_dir(out_dir: Path):
    """Start from an empty output directory. Clearing is best effort."""
    if out_dir.exists():
        try:
            shutil.rmtree(out_dir)
        except OSError as e:
            log.warning(f"Could not remove {out_dir} ({e}), clearing its contents instead")
            for entry in out_dir.iterdir():
                try:
                    if entry.is_dir() and not entry.is_symlink():
                        shutil.rmtree(entry)
                    else:
                        entry.unlink()
                except OSError as err:
                    log.warning(f"  Could not remove {entry.name}: {err}")

    (out_dir / "projects").mkdir(parents=True, exist_ok=True)


def copy_static_assets(config: SiteConfig):
    if config.assets_dir.exists():
        dest = config.out_dir / "assets"
        dest.mkdir(parents=True, exist_ok=True)
        for src in config.assets_dir.iterdir():
            if src.is_file():
                shutil.copy2(src, dest / src.name)

    for name in TEMPLATE_FILES:
        src = config.templates_dir / name
        if src.exists():
            shutil.copy2(src, config.out_dir / name)
        else:
            log.warning(f"Template file missing: {src}")


def write_text(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write_json(path: Path, data):
    write_text(path, json.dumps(data, indent=2, ensure_ascii=False))


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------

def build_site(config: SiteConfig, now: Optional[datetime] = None) -> BuildResult:
    now = now or datetime.now(timezone.utc)
    out = config.out_dir

    log.info("🚀 Starting site generation...")
    prepare_output_dir(out)
    copy_static_assets(config)

    parsed = content_loader.load_projects(config.projects_dir)
    projects = enrichment.enrich_projects(parsed, config)

    for slug, titles in content_loader.find_slug_collisions(projects).items():
        log.warning(f"⚠️  Slug collision '{slug}' between {titles}; "
                    f"projects/{slug}.html will hold the last one")

    for p in projects:
        write_text(out / "projects" / f"{p.slug}.html", site_render.render_project_page(p, config))

    categories = site_render.group_by_category(projects)
    write_text(out / "index.html", site_render.render_homepage(projects, config, categories))
    write_text(out / "projects" / "index.html", site_render.render_listing_page(projects, config))
    write_json(out / "projects.json", site_render.projects_json(projects))

    board = leaderboard.build_leaderboard(config)
    write_json(out / "leaderboard.json", site_render.leaderboard_json(board))
    all_time = leaderboard.windowed_leaderboard(board, "all", now)
    write_text(out / "leaderboard.html", site_render.render_leaderboard_page(all_time, config))

    write_text(out / "sitemap.xml", site_render.render_sitemap(projects, config, now))
    write_text(out / "robots.txt", site_render.render_robots(config))

    log.info("✅ Site generated successfully!")
    log.info(f"📊 Generated {len(projects)} projects in {len(categories)} categories")
    log.info(f"📁 Output directory: {out}")
    return BuildResult(out_dir=out, projects=projects, leaderboard=board, categories=categories)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate the all_we_need static site.")
    parser.add_argument("--projects-dir", type=Path, help="directory of project markdown files")
    parser.add_argument("--out-dir", type=Path, help="output directory (default: docs)")
    parser.add_argument("--site-url", help="absolute site URL used in canonical links and sitemap")
    parser.add_argument("--source-repo", help="owner/repo whose merged PRs feed the leaderboard")
    parser.add_argument("--log-file", type=Path, help="also write the log to this file")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def config_from_args(args) -> SiteConfig:
    config = SiteConfig.from_env()
    if args.projects_dir:
        config.projects_dir = args.projects_dir
    if args.out_dir:
        config.out_dir = args.out_dir
    if args.site_url:
        config.site_url = args.site_url.rstrip("/")
    if args.source_repo:
        config.source_repo = args.source_repo
    if args.log_file:
        config.log_file = args.log_file
    return config


def main(argv=None) -> int:
    args = parse_args(argv)
    config = config_from_args(args)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, config.log_file)

    log.info("=" * 60)
    log.info(f"{config.site_name.upper()} SITE GENERATOR")
    log.info(f"Projects: {config.projects_dir} | Output: {config.out_dir}")
    log.info(f"Site: {config.site_url} | Leaderboard repo: {config.source_repo}")
    log.info(f"GitHub token: {'set' if config.github_token else 'not set (60 req/h limit)'}")
    log.info("=" * 60)

    try:
        build_site(config)
    except Exception:
        log.exception("❌ Build failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
