"""
Site configuration and logging for the all_we_need generator.

Configuration via environment variables or .env file.
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SITE_URL = "https://allweneed.github.io"
DEFAULT_SITE_NAME = "all_we_need"
DEFAULT_SOURCE_REPO = "ghostshanky/allweneed.github.io"

log = logging.getLogger("allweneed")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class SiteConfig:
    projects_dir: Path
    out_dir: Path
    templates_dir: Path
    assets_dir: Path
    site_url: str = DEFAULT_SITE_URL
    site_name: str = DEFAULT_SITE_NAME
    source_repo: str = DEFAULT_SOURCE_REPO
    github_token: str = ""  # optional, raises the API rate limit
    request_timeout: float = 10
    contributors_limit: int = 10
    pulls_limit: int = 100
    category_collapse_at: int = 6
    log_file: Optional[Path] = None

    @property
    def repo_url(self) -> str:
        return f"https://github.com/{self.source_repo}"

    @classmethod
    def from_env(cls, root: Optional[Path] = None) -> "SiteConfig":
        """Build a config from the environment, loading .env first."""
        load_dotenv()
        root = Path(root) if root else Path.cwd()

        return cls(
            projects_dir=root / os.getenv("PROJECTS_DIR", "projects"),
            out_dir=root / os.getenv("OUT_DIR", "docs"),  # GitHub Pages serves from docs/
            templates_dir=root / "templates",
            assets_dir=root / "assets",
            site_url=os.getenv("SITE_URL", DEFAULT_SITE_URL).rstrip("/"),
            site_name=os.getenv("SITE_NAME", DEFAULT_SITE_NAME),
            source_repo=os.getenv("SOURCE_REPO", DEFAULT_SOURCE_REPO),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT") or "10"),
        )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None):
    handlers = [
        logging.StreamHandler(
            open(sys.stdout.fileno(), mode="w", encoding="utf-8", closefd=False)
        ),
    ]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )
    return log
