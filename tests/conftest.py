from pathlib import Path
from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlmodel import Session

from blog.config import Settings
from blog.database import build_engine, init_db
from blog.main import create_app


POSTS = {
    "hello-world.md": """---
title: Hello, World
date: 20200105
draft: false
slug: hello-world
category: meta
tags:
  - blogging
  - react
description: Why this blog exists.
---

Welcome to the blog.

## How posts are stored

Each file holds one post.
""",
    "dungeons.md": """---
title: Procedural Dungeon Generation
date: 20200218
slug: procedural-dungeon-generation
category: gamedev
tags: [javascript, gamedev]
description: Rooms and corridors.
---

## Update Level.generate() to add enemies to rooms

Enemies go in each leaf.
""",
    "draft-notes.md": """---
title: Notes on React Hooks
date: 2020-03-01
draft: true
slug: react-hooks
category: frontend
tags: [react]
---

Still writing this one.
""",
}


def write_posts(directory: Path, posts: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for filename, text in posts.items():
        (directory / filename).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    return write_posts(tmp_path / "posts", POSTS)


@pytest.fixture
def settings(posts_dir: Path) -> Settings:
    return Settings(dev=True, posts_dir=posts_dir, database_url="sqlite://")


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session() -> Iterator[Session]:
    engine = build_engine("sqlite://")
    init_db(engine)
    with Session(engine) as db_session:
        yield db_session
    engine.dispose()
