from __future__ import annotations

from datetime import UTC, datetime

import pytest

from tests._fixtures.github_host import FakeGitHub


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Provide an in-memory host seeded with a small repository on main."""
    return FakeGitHub.with_files(
        {
            "package.json": '{"name": "widgets"}',
            "src/app.js": "import express from 'express';",
            "routes/index.js": "export default {};",
            ".clinerules": "Use ES modules.",
        }
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 4, 1, 9, 5, 7, tzinfo=UTC)
