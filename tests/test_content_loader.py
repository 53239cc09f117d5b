import logging

import pytest

import content_loader
from content_loader import load_project_file, load_projects, slugify_title

VALID = """---
title: HTTPie
link: https://github.com/httpie/cli
description: Command-line HTTP client.
tags: [cli, http]
logo: /assets/httpie.png
screenshot: https://example.com/shot.png
---

## Features

- JSON
"""


@pytest.mark.parametrize("title, slug", [
    ("HTTPie", "httpie"),
    ("Hello, World!", "hello-world"),
    ("Café Déjà Vu", "cafe-deja-vu"),
    ("  Spaces   everywhere ", "spaces-everywhere"),
])
def test_slugify_title(title, slug):
    assert slugify_title(title) == slug


def test_slugify_is_idempotent_and_deterministic():
    title = "The Ultimate Tool: v2.0 (beta)"
    once = slugify_title(title)
    assert slugify_title(once) == once
    assert slugify_title(title) == once


def test_load_valid_project(write_project):
    path = write_project("httpie.md", VALID)
    project = load_project_file(path)

    assert project.title == "HTTPie"
    assert project.link == "https://github.com/httpie/cli"
    assert project.tags == ["cli", "http"]
    assert project.logo == "/assets/httpie.png"
    assert project.screenshot == "https://example.com/shot.png"
    assert project.source_file == "httpie.md"
    assert "<h2>Features</h2>" in project.content_html
    assert "<li>JSON</li>" in project.content_html


@pytest.mark.parametrize("front_matter, missing", [
    ("title: X\nlink: https://x.dev\n", "description"),
    ("link: https://x.dev\ndescription: d\n", "title"),
    ("title: X\ndescription: d\n", "link"),
    ("title: '   '\nlink: https://x.dev\ndescription: d\n", "title"),
])
def test_missing_required_fields_are_skipped(write_project, caplog, front_matter, missing):
    path = write_project("broken.md", f"---\n{front_matter}---\nbody\n")
    with caplog.at_level(logging.WARNING, logger="allweneed"):
        assert load_project_file(path) is None
    assert "broken.md" in caplog.text
    assert missing in caplog.text


def test_unparseable_front_matter_is_skipped(write_project, caplog):
    path = write_project("bad.md", "---\ntitle: [unclosed\nlink: x\n---\nbody\n")
    with caplog.at_level(logging.WARNING, logger="allweneed"):
        assert load_project_file(path) is None
    assert "bad.md" in caplog.text


@pytest.mark.parametrize("raw, tags", [
    (["cli", " web ", "", None], ["cli", "web"]),
    ("cli", ["cli"]),
    (None, []),
    ({"a": 1}, []),
    ([1, 2], ["1", "2"]),
])
def test_normalize_tags(raw, tags):
    assert content_loader.normalize_tags(raw) == tags


def test_load_projects_reads_markdown_in_order(config, write_project):
    write_project("b.md", VALID.replace("HTTPie", "Beta"))
    write_project("a.md", VALID.replace("HTTPie", "Alpha"))
    write_project("c.md", "---\ntitle: Missing bits\n---\n")
    write_project("notes.txt", VALID)

    projects = load_projects(config.projects_dir)
    assert [p.title for p in projects] == ["Alpha", "Beta"]


def test_load_projects_creates_missing_directory(tmp_path):
    target = tmp_path / "nothing-here"
    assert load_projects(target) == []
    assert target.is_dir()


def test_find_slug_collisions():
    class R:
        def __init__(self, title):
            self.title = title
            self.slug = slugify_title(title)

    records = [R("Foo Bar"), R("foo-bar"), R("Other")]
    assert content_loader.find_slug_collisions(records) == {"foo-bar": ["Foo Bar", "foo-bar"]}
