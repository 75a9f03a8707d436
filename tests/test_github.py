"""Test GitHub projects."""

import pytest
import requests

from gitrelease.config import get_config
from gitrelease.exceptions import (
    ApiError,
    BadResponseError,
    FetchError,
    NoReleasesError,
    NoSemverTagsError,
    RateLimitError,
    RepoNotFoundError,
)
from gitrelease.gitrelease import latest
from gitrelease.repo_holders.github import GitHubRepoSession

from .helpers import make_response, tag_records

API = "https://api.github.com/repos/php/php-src"


def page(number):
    return {"per_page": 100, "page": number}


def test_latest_release(fake_api):
    """Without a version prefix the /releases/latest tag is returned as is."""
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": "php-8.4.1", "name": "PHP 8.4.1"}))

    assert latest("php/php-src") == "php-8.4.1"
    assert fake_api.urls == [f"{API}/releases/latest"]


def test_latest_release_empty_tag(fake_api):
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": ""}))

    with pytest.raises(NoReleasesError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value) == "no releases found for GitHub repository: php/php-src"


def test_latest_release_not_found(fake_api):
    fake_api.add(f"{API}/releases/latest", make_response(404, {"message": "Not Found"}))

    with pytest.raises(RepoNotFoundError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value) == "GitHub repository or release not found: php/php-src"


def test_headers_and_timeout(fake_api):
    """GitHub requires a User-Agent; tokens go into the Authorization header."""
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": "php-8.4.1"}))

    latest("php/php-src", token="s3cr3t")

    call = fake_api.calls[0]
    assert call["headers"]["User-Agent"] == "gitrelease-cli"
    assert call["headers"]["Authorization"] == "token s3cr3t"
    assert call["timeout"] == 10


def test_token_from_environment(fake_api, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": "php-8.4.1"}))

    latest("php/php-src")

    assert fake_api.calls[0]["headers"]["Authorization"] == "token from-env"


def test_explicit_token_wins_over_environment(fake_api, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "from-env")
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": "php-8.4.1"}))

    latest("php/php-src", token="from-flag")

    assert fake_api.calls[0]["headers"]["Authorization"] == "token from-flag"


def test_no_token_no_authorization(fake_api):
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": "php-8.4.1"}))

    latest("php/php-src")

    assert "Authorization" not in fake_api.calls[0]["headers"]


def test_version_prefix_walks_all_pages(fake_api):
    """Two full pages and a short one are all collected before sorting."""
    first = [f"php-7.{i // 50}.{i % 50}" for i in range(100)]
    second = [f"php-8.1.{i}" for i in range(100)]
    third = ["php-8.2.1", "php-8.2.26", "php-8.2.2", "php-7.4.0"]
    fake_api.add(f"{API}/tags", make_response(200, tag_records(first)), params=page(1))
    fake_api.add(f"{API}/tags", make_response(200, tag_records(second)), params=page(2))
    fake_api.add(f"{API}/tags", make_response(200, tag_records(third)), params=page(3))

    with GitHubRepoSession("php/php-src") as holder:
        tags = holder.get_all_tags()
    assert len(tags) == 204

    assert latest("php/php-src", version_prefix="8.2") == "php-8.2.26"
    assert latest("php/php-src", version_prefix="8.1") == "php-8.1.99"


def test_pagination_stops_on_empty_page(fake_api):
    full = [f"php-8.2.{i}" for i in range(100)]
    fake_api.add(f"{API}/tags", make_response(200, tag_records(full)), params=page(1))
    fake_api.add(f"{API}/tags", make_response(200, []), params=page(2))

    assert latest("php/php-src", version_prefix="8.2") == "php-8.2.99"
    assert fake_api.urls == [
        f"{API}/tags?per_page=100&page=1",
        f"{API}/tags?per_page=100&page=2",
    ]


def test_configured_page_size(fake_api):
    first = make_response(200, tag_records(["php-8.2.1", "php-8.2.2"]))
    fake_api.add(f"{API}/tags", first, params={"per_page": 2, "page": 1})
    fake_api.add(f"{API}/tags", make_response(200, tag_records(["php-8.2.3"])), params={"per_page": 2, "page": 2})

    with GitHubRepoSession("php/php-src", per_page=2) as holder:
        assert holder.get_latest_tag("8.2") == "php-8.2.3"


def test_page_size_above_api_maximum(fake_api):
    """Oversized page sizes are capped so a full page still leads to the next one."""
    get_config().set("per_page", 200)
    first = [f"php-8.1.{i}" for i in range(100)]
    fake_api.add(f"{API}/tags", make_response(200, tag_records(first)), params=page(1))
    fake_api.add(f"{API}/tags", make_response(200, tag_records(["php-8.2.26"])), params=page(2))

    assert latest("php/php-src", version_prefix="8.2") == "php-8.2.26"
    assert len(fake_api.calls) == 2


@pytest.mark.parametrize("per_page, expected", [(500, 100), (0, 100), (-5, 1), (30, 30)])
def test_page_size_bounds(per_page, expected):
    assert GitHubRepoSession("php/php-src", per_page=per_page).per_page == expected


def test_version_prefix_without_semver_tags(fake_api):
    fake_api.add(f"{API}/tags", make_response(200, tag_records(["php-8.2.x-custom"])), params=page(1))

    with pytest.raises(NoSemverTagsError):
        latest("php/php-src", version_prefix="8.2")


def test_error_on_later_page_aborts(fake_api):
    """A failing page discards everything fetched so far."""
    fake_api.add(f"{API}/tags", make_response(200, tag_records([f"php-8.2.{i}" for i in range(100)])), params=page(1))
    fake_api.add(f"{API}/tags", make_response(500, {"message": "boom"}), params=page(2))

    with pytest.raises(ApiError) as excinfo:
        latest("php/php-src", version_prefix="8.2")
    assert str(excinfo.value) == "GitHub API error: 500 Internal Server Error"


def test_tags_not_found(fake_api):
    fake_api.add(f"{API}/tags", make_response(404, {"message": "Not Found"}), params=page(1))

    with pytest.raises(RepoNotFoundError) as excinfo:
        latest("php/php-src", version_prefix="8.2")
    assert str(excinfo.value) == "GitHub repository not found: php/php-src"


def test_rate_limited(fake_api):
    headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": "1700000000"}
    fake_api.add(f"{API}/releases/latest", make_response(403, {"message": "API rate limit exceeded"}, headers=headers))

    with pytest.raises(RateLimitError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value) == "GitHub rate limit exceeded. Try again at 2023-11-14 22:13:20 UTC"


def test_forbidden_with_quota_left_is_not_rate_limit(fake_api):
    headers = {"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1700000000"}
    fake_api.add(f"{API}/releases/latest", make_response(403, {"message": "Forbidden"}, headers=headers))

    with pytest.raises(ApiError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value) == "GitHub API error: 403 Forbidden"


def test_secondary_rate_limit(fake_api):
    fake_api.add(f"{API}/releases/latest", make_response(429, {}, headers={"Retry-After": "60"}))

    with pytest.raises(RateLimitError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value) == "GitHub rate limit exceeded. Retry after 60 seconds"


def test_malformed_json(fake_api):
    fake_api.add(f"{API}/releases/latest", make_response(200, text="<html>oops</html>"))

    with pytest.raises(BadResponseError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value).startswith("failed to parse GitHub release JSON")


def test_unexpected_json_shape(fake_api):
    fake_api.add(f"{API}/tags", make_response(200, {"message": "not a list"}), params=page(1))

    with pytest.raises(BadResponseError):
        latest("php/php-src", version_prefix="8.2")


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("connection refused"), requests.Timeout("read timed out")],
)
def test_transport_errors(fake_api, error):
    fake_api.add(f"{API}/releases/latest", error)

    with pytest.raises(FetchError) as excinfo:
        latest("php/php-src")
    assert str(excinfo.value).startswith("failed to fetch GitHub release: ")


def test_api_base_override(fake_api):
    base = "http://127.0.0.1:8080"
    fake_api.add(f"{base}/repos/php/php-src/releases/latest", make_response(200, {"tag_name": "php-8.4.1"}))

    assert latest("php/php-src", api_base=f"{base}/") == "php-8.4.1"


def test_dict_output(fake_api):
    fake_api.add(f"{API}/releases/latest", make_response(200, {"tag_name": "php-8.4.1"}))

    assert latest("https://github.com/php/php-src/releases", output_format="dict") == {
        "provider": "github",
        "repo": "php/php-src",
        "tag_name": "php-8.4.1",
    }
