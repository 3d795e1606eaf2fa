from __future__ import annotations

from release_script.core.result import Err, Ok, Result
from release_script.git.repository import GitError, Repository
from release_script.output.console import ConsoleProtocol
from release_script.release.errors import ReleaseError


def _git_failed(error: GitError) -> ReleaseError:
    return ReleaseError(
        kind="command_failed",
        message=f"git {error.command} failed (exit {error.returncode})",
        output=error.message or None,
    )


def check_preflight(*, repo: Repository, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    """Refuse to release from a dirty tree or a branch behind its upstream.

    Runs before any mutation; the only side effect is ``git fetch``.
    """
    pending = repo.pending_changes()
    if isinstance(pending, Err):
        return Err(_git_failed(pending.error))
    if pending.value:
        return Err(
            ReleaseError(
                kind="dirty_tree",
                message="git repository must be clean",
                hint="Commit or stash: " + ", ".join(pending.value[:5]),
            )
        )
    console.info("no pending changes")

    fetched = repo.fetch()
    if isinstance(fetched, Err):
        return Err(_git_failed(fetched.error))

    status = repo.status()
    if isinstance(status, Err):
        return Err(_git_failed(status.error))
    if status.value.is_behind:
        return Err(
            ReleaseError(
                kind="behind_upstream",
                message=f"your repo is behind by {status.value.behind} commits",
                hint="Run: git pull",
            )
        )
    console.info("current with latest changes from remote")

    return Ok(None)
