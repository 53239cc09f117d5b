"""
Load project descriptions from projects/*.md.

Each file carries YAML front matter (title, link, description, tags, logo,
screenshot) followed by a markdown body.

Dependencies:
  pip install python-frontmatter python-slugify markdown
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import frontmatter
import markdown
from slugify import slugify

REQUIRED_FIELDS = ("title", "link", "description")
MARKDOWN_EXTENSIONS = ["extra", "fenced_code", "tables"]

log = logging.getLogger("allweneed")


@dataclass
class ParsedProject:
    title: str
    link: str
    description: str
    source_file: str
    tags: list = field(default_factory=list)
    logo: str = ""
    screenshot: str = ""
    content_html: str = ""


def slugify_title(title: str) -> str:
    return slugify(str(title or ""), lowercase=True)


def render_markdown(body: str) -> str:
    return markdown.markdown(body or "", extensions=MARKDOWN_EXTENSIONS)


def normalize_tags(raw) -> list[str]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, (list, tuple)):
        return []
    tags = []
    for tag in raw:
        tag = str(tag).strip() if tag is not None else ""
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _text(meta: dict, key: str) -> str:
    value = meta.get(key)
    return str(value).strip() if value is not None else ""


def load_project_file(path: Path) -> Optional[ParsedProject]:
    """Parse one project file. Returns None (with a warning) if it is unusable."""
    try:
        post = frontmatter.load(path)
    except Exception as e:
        log.warning(f"⚠️  Skipping {path.name}: could not parse front matter ({e})")
        return None

    meta = dict(post.metadata or {})
    missing = [key for key in REQUIRED_FIELDS if not _text(meta, key)]
    if missing:
        log.warning(f"⚠️  Skipping {path.name}: missing required frontmatter fields "
                    f"({', '.join(missing)})")
        return None

    return ParsedProject(
        title=_text(meta, "title"),
        link=_text(meta, "link"),
        description=_text(meta, "description"),
        source_file=path.name,
        tags=normalize_tags(meta.get("tags")),
        logo=_text(meta, "logo"),
        screenshot=_text(meta, "screenshot"),
        content_html=render_markdown(post.content),
    )


def load_projects(projects_dir: Path) -> list[ParsedProject]:
    """Read every markdown file in the projects directory, in filename order."""
    projects_dir = Path(projects_dir)
    if not projects_dir.exists():
        log.info("📁 Creating projects directory...")
        projects_dir.mkdir(parents=True, exist_ok=True)

    files = sorted(p for p in projects_dir.glob("*.md") if p.is_file())
    log.info(f"📄 Found {len(files)} project files")

    parsed = []
    for path in files:
        project = load_project_file(path)
        if project:
            parsed.append(project)
    return parsed


def find_slug_collisions(records) -> dict[str, list[str]]:
    """Slugs shared by more than one record, mapped to the clashing titles."""
    by_slug = defaultdict(list)
    for record in records:
        by_slug[record.slug].append(record.title)
    return {slug: titles for slug, titles in by_slug.items() if len(titles) > 1}
