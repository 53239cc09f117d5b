from pathlib import Path

import pytest
import requests

from site_config import SiteConfig

ROOT = Path(__file__).resolve().parents[1]


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, bad_json=False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self.headers = headers or {}
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


@pytest.fixture
def config(tmp_path):
    return SiteConfig(
        projects_dir=tmp_path / "projects",
        out_dir=tmp_path / "docs",
        templates_dir=ROOT / "templates",
        assets_dir=tmp_path / "assets",
        site_url="https://example.test",
        source_repo="acme/site",
    )


@pytest.fixture
def offline(monkeypatch):
    """Every HTTP request fails; the returned list records attempted URLs."""
    calls = []

    def fake_get(url, **kwargs):
        calls.append(url)
        raise requests.ConnectionError("network disabled in tests")

    monkeypatch.setattr("github_api.requests.get", fake_get)
    return calls


@pytest.fixture
def write_project(config):
    def _write(name: str, text: str) -> Path:
        config.projects_dir.mkdir(parents=True, exist_ok=True)
        path = config.projects_dir / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write
