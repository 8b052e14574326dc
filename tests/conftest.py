"""Shared fixtures: sample plans and a clean configuration per test."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from planviz.config import ENV_PREFIX, reset_config

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_plan(name: str) -> str:
    """Load a plan text fixture."""
    return (FIXTURES_DIR / f"{name}.txt").read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch):
    """No PLANVIZ_* variables leak in, and the cached config starts fresh."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def broadcast_plan() -> str:
    """Hash join with a broadcast inner side; every self cost is 0 or 59."""
    return load_plan("broadcast_hash_join")


@pytest.fixture
def nested_loop_plan() -> str:
    """Broadcast nested loop over a 20,000-row scan."""
    return load_plan("nested_loop_large_scan")


@pytest.fixture
def expensive_hash_plan() -> str:
    """Hash join and hash step that both have a self cost of 80."""
    return load_plan("expensive_hash")


@pytest.fixture
def plan_file(tmp_path: Path, broadcast_plan: str) -> Path:
    path = tmp_path / "plan.txt"
    path.write_text(broadcast_plan, encoding="utf-8")
    return path
