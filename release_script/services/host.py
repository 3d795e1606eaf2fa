"""Hosted release page (GitHub releases API).

Publishing the release page is a notification, not an artifact: any failure is
a warning and never changes the exit status. The request runs on a daemon
thread that nobody joins, so the process may exit before the response
arrives; in that case the outcome is simply not reported.
"""

from __future__ import annotations

import threading
from typing import Any

from release_script.core.result import Err
from release_script.output.console import ConsoleProtocol
from release_script.platform.http import HttpClient, HttpError

GITHUB_API_URL = "https://api.github.com"
TOKEN_ENV = "GITHUB_TOKEN"


def releases_url(owner_repo: str) -> str:
    return f"{GITHUB_API_URL}/repos/{owner_repo}/releases"


def release_payload(*, tag_name: str, notes: str | None, is_prerelease: bool) -> dict[str, Any]:
    return {
        "tag_name": tag_name,
        "name": tag_name,
        "body": notes or tag_name,
        "draft": False,
        "prerelease": is_prerelease,
    }


class HostReleasePublisher:
    def __init__(self, *, client: HttpClient, console: ConsoleProtocol) -> None:
        self._client = client
        self._console = console

    def create_release(
        self,
        *,
        token: str,
        owner_repo: str,
        tag_name: str,
        notes: str | None,
        is_prerelease: bool,
    ) -> bool:
        """POST the release and log the outcome. Returns True on success."""
        result = self._client.post_json(
            releases_url(owner_repo),
            release_payload(tag_name=tag_name, notes=notes, is_prerelease=is_prerelease),
            headers={"Authorization": f"token {token}"},
        )
        if isinstance(result, Err):
            self._report_failure(result.error)
            return False

        url = result.value.get("html_url")
        suffix = f": {url}" if isinstance(url, str) else ""
        self._console.success(f"released on GitHub{suffix}")
        return True

    def publish_in_background(
        self,
        *,
        token: str,
        owner_repo: str,
        tag_name: str,
        notes: str | None,
        is_prerelease: bool,
    ) -> threading.Thread:
        """Fire the release request without blocking the pipeline."""
        thread = threading.Thread(
            target=self.create_release,
            kwargs={
                "token": token,
                "owner_repo": owner_repo,
                "tag_name": tag_name,
                "notes": notes,
                "is_prerelease": is_prerelease,
            },
            name="host-release",
            daemon=True,
        )
        thread.start()
        return thread

    def _report_failure(self, error: HttpError) -> None:
        if error.is_unauthorized:
            self._console.warning(f"invalid GitHub token, release page not created ({error.url})")
            return
        self._console.warning(f"GitHub release failed: {error}")
