from __future__ import annotations

from release_script.output.console import MockConsole
from release_script.platform.http import HttpError, MockHttpClient
from release_script.services.host import HostReleasePublisher, release_payload, releases_url

URL = "https://api.github.com/repos/org/demo/releases"


def test_releases_url() -> None:
    assert releases_url("org/demo") == URL


def test_payload_defaults_body_to_tag() -> None:
    assert release_payload(tag_name="v1.3.0", notes=None, is_prerelease=False) == {
        "tag_name": "v1.3.0",
        "name": "v1.3.0",
        "body": "v1.3.0",
        "draft": False,
        "prerelease": False,
    }
    assert release_payload(tag_name="v2.0.0-beta.0", notes="Beta", is_prerelease=True)["body"] == "Beta"


def _publish(client: MockHttpClient) -> tuple[bool, MockConsole]:
    console = MockConsole()
    publisher = HostReleasePublisher(client=client, console=console)
    ok = publisher.create_release(
        token="s3cret", owner_repo="org/demo", tag_name="v1.3.0", notes="notes", is_prerelease=False
    )
    return ok, console


def test_success() -> None:
    client = MockHttpClient()
    client.set_response(URL, {"html_url": "https://github.com/org/demo/releases/tag/v1.3.0"})

    ok, console = _publish(client)

    assert ok
    assert client.posts[0].headers == {"Authorization": "token s3cret"}
    assert client.posts[0].payload["body"] == "notes"
    assert console.find("released on GitHub: https://github.com/org/demo/releases/tag/v1.3.0")


def test_unauthorized_only_warns() -> None:
    client = MockHttpClient()
    client.set_response(URL, HttpError(url=URL, status=401, message="Unauthorized"))

    ok, console = _publish(client)

    assert not ok
    assert console.find("invalid GitHub token")
    assert not console.has_error()


def test_other_failures_only_warn() -> None:
    client = MockHttpClient()
    client.set_response(URL, HttpError(url=URL, status=422, message="Unprocessable Entity"))

    ok, console = _publish(client)

    assert not ok
    assert console.find("GitHub release failed: HTTP 422")


def test_publish_in_background() -> None:
    client = MockHttpClient()
    client.set_response(URL, {})
    console = MockConsole()
    publisher = HostReleasePublisher(client=client, console=console)

    thread = publisher.publish_in_background(
        token="t", owner_repo="org/demo", tag_name="v1.3.0", notes=None, is_prerelease=False
    )
    thread.join(timeout=5)

    assert thread.daemon
    assert not thread.is_alive()
    assert len(client.posts) == 1
    assert console.messages == ["OK released on GitHub"]
