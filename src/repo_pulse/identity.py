"""Owner/repo identity parsing and validation."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InvalidInputError

_REPO_URL_RE = re.compile(r"^https://github\.com/([^/]+)/([^/]+?)(?:/|\.git)?$")


@dataclass(frozen=True)
class RepoIdentity:
    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def validate_identity(owner: str, repo: str) -> RepoIdentity:
    """Return a RepoIdentity, rejecting empty or slash-containing parts."""
    owner = (owner or "").strip()
    repo = (repo or "").strip()
    if not owner or not repo:
        raise InvalidInputError("Owner and repository name must be non-empty")
    if "/" in owner or "/" in repo:
        raise InvalidInputError(f"Invalid repository identity: {owner}/{repo}")
    return RepoIdentity(owner=owner, repo=repo)


def parse_repo_url(url: str) -> RepoIdentity:
    """Parse ``https://github.com/owner/repo`` (optionally ``.git`` or ``/``)."""
    match = _REPO_URL_RE.match(url.strip())
    if not match:
        raise InvalidInputError("Invalid GitHub repository URL")
    return validate_identity(match.group(1), match.group(2))


def parse_target(target: str) -> RepoIdentity:
    """Parse a CLI target given either as ``owner/repo`` or as a GitHub URL."""
    target = target.strip()
    if target.startswith("https://"):
        return parse_repo_url(target)
    if target.count("/") != 1:
        raise InvalidInputError(
            f"Invalid target '{target}': expected owner/repo or a GitHub URL"
        )
    owner, repo = target.split("/", 1)
    return validate_identity(owner, repo)
