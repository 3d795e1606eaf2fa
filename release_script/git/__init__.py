"""Git queries used by the release preflight."""

from release_script.git.repository import GitError, GitStatus, Repository, parse_status

__all__ = [
    "GitError",
    "GitStatus",
    "Repository",
    "parse_status",
]
