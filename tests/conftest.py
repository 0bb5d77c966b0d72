# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from task_prioritizer.app.main import create_app
from task_prioritizer.config import Settings
from task_prioritizer.infra.db.sqlite import create_schema, make_engine, make_sessionmaker, make_sqlite_url
from task_prioritizer.infra.db.task_repo_memory import InMemoryTaskRepo
from task_prioritizer.infra.db.task_repo_sqlite import SQLiteTaskRepo


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(db_path=str(tmp_path / "tasks.db"), log_dir=str(tmp_path / "logs"))


@pytest.fixture()
def memory_repo() -> InMemoryTaskRepo:
    return InMemoryTaskRepo()


@pytest.fixture()
def client(settings: Settings, memory_repo: InMemoryTaskRepo) -> TestClient:
    """HTTP client over the real app, backed by the in-memory store."""
    app = create_app(settings, repo=memory_repo)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def sqlite_client(settings: Settings) -> TestClient:
    """HTTP client over the fully wired app, SQLite file under tmp_path."""
    with TestClient(create_app(settings)) as c:
        yield c


@pytest_asyncio.fixture()
async def sqlite_repo(tmp_path: Path):
    engine = make_engine(make_sqlite_url(str(tmp_path / "repo.db")))
    await create_schema(engine)
    yield SQLiteTaskRepo(make_sessionmaker(engine))
    await engine.dispose()
