"""Shared test fixtures: raw GitHub payloads."""

from __future__ import annotations

import pytest


@pytest.fixture
def raw_repository() -> dict:
    return {
        "id": 1,
        "name": "widget",
        "full_name": "acme/widget",
        "description": "Widgets for everyone",
        "html_url": "https://github.com/acme/widget",
        "language": "Python",
        "stargazers_count": 1500,
        "watchers_count": 1500,
        "forks_count": 300,
        "open_issues_count": 10,
        "license": {"key": "mit", "name": "MIT License"},
        "created_at": "2022-01-01T00:00:00Z",
        "updated_at": "2024-06-01T00:00:00Z",
        "pushed_at": "2024-06-01T00:00:00Z",
        "size": 2048,
        "default_branch": "main",
    }


@pytest.fixture
def raw_contributors() -> list[dict]:
    return [
        {
            "login": f"user{i}",
            "id": i,
            "avatar_url": f"https://avatars.example/{i}",
            "contributions": 100 - i,
            "html_url": f"https://github.com/user{i}",
        }
        for i in range(3)
    ]


@pytest.fixture
def raw_commits() -> list[dict]:
    return [
        {
            "sha": "abc1234def",
            "commit": {
                "author": {
                    "name": "Alice",
                    "email": "alice@example.com",
                    "date": "2024-06-03T10:30:00Z",
                },
                "message": "feat: add widget\n\nLonger body",
            },
            "html_url": "https://github.com/acme/widget/commit/abc1234def",
            "author": {"login": "alice", "avatar_url": "https://avatars.example/a"},
        },
        {
            "sha": "def5678abc",
            "commit": {
                "author": {
                    "name": "Bob",
                    "email": "bob@example.com",
                    "date": "2024-06-02T09:00:00Z",
                },
                "message": "fix: bug",
            },
            "html_url": "https://github.com/acme/widget/commit/def5678abc",
            "author": None,
        },
    ]


@pytest.fixture
def raw_issues() -> list[dict]:
    return [
        {
            "id": 11,
            "number": 1,
            "title": "Crash on start",
            "state": "open",
            "created_at": "2024-05-01T00:00:00Z",
            "closed_at": None,
            "labels": [{"name": "bug", "color": "d73a4a"}],
            "html_url": "https://github.com/acme/widget/issues/1",
        },
        {
            "id": 12,
            "number": 2,
            "title": "Add docs",
            "state": "closed",
            "created_at": "2024-04-01T00:00:00Z",
            "closed_at": "2024-04-02T00:00:00Z",
            "labels": [
                {"name": "docs", "color": "0075ca"},
                {"name": "bug", "color": "d73a4a"},
            ],
            "html_url": "https://github.com/acme/widget/issues/2",
        },
    ]


@pytest.fixture
def raw_commit_activity() -> list[dict]:
    return [
        {"week": 1717200000 + i * 604800, "total": i, "days": [0, i, 0, 0, 0, 0, 0]}
        for i in range(14)
    ]


@pytest.fixture
def raw_languages() -> dict:
    return {"Python": 7000, "Shell": 2000, "Makefile": 1000}


@pytest.fixture
def raw_payloads(
    raw_repository,
    raw_contributors,
    raw_commits,
    raw_issues,
    raw_commit_activity,
    raw_languages,
) -> dict:
    return {
        "repository": raw_repository,
        "contributors": raw_contributors,
        "commits": raw_commits,
        "issues": raw_issues,
        "commit_activity": raw_commit_activity,
        "languages": raw_languages,
    }
