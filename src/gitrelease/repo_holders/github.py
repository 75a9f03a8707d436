"""GitHub repository session class."""

import logging

from gitrelease.exceptions import BadResponseError, NoReleasesError, RateLimitError
from gitrelease.repo_holders.base import PAGINATION_PAGE_NUMBER, BaseProjectHolder
from gitrelease.utils import format_reset_time

log = logging.getLogger(__name__)


class GitHubRepoSession(BaseProjectHolder):
    """A class to represent a GitHub project holder."""

    PROVIDER_NAME = "GitHub"
    DEFAULT_HOSTNAME = "github.com"
    DEFAULT_API_BASE = "https://api.github.com"
    SELF_HOSTED_API_FORMAT = "https://{hostname}/api/v3"
    TOKEN_ENV_VAR = "GITHUB_TOKEN"

    PAGINATION = PAGINATION_PAGE_NUMBER

    def __init__(self, repo, api_base=None, token=None, timeout=None, per_page=None):
        super().__init__(repo, api_base=api_base, token=token, timeout=timeout, per_page=per_page)
        # Explicitly specify the API version that we want:
        self.headers.update({"Accept": "application/vnd.github+json"})

    def auth_headers(self, token):
        return {"Authorization": f"token {token}"}

    def rate_limit_error(self, response):
        """GitHub signals an exhausted quota with 403 and zero remaining requests."""
        if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            reset_time = format_reset_time(response.headers.get("X-RateLimit-Reset"))
            if reset_time:
                return RateLimitError(f"GitHub rate limit exceeded. Try again at {reset_time}")
            return RateLimitError("GitHub rate limit exceeded.")
        # secondary rate limits may come as 429
        return super().rate_limit_error(response)

    def repo_url(self, uri):
        return f"{self.api_base}/repos/{self.repo}{uri}"

    def tags_url(self):
        return self.repo_url("/tags")

    def get_latest_release(self):
        """Get the tag of the release GitHub marks as latest.

        GitHub's "latest" is the most recent non-prerelease, non-draft
        release, which is not necessarily the highest version.
        """
        release = self.fetch_json(
            self.repo_url("/releases/latest"),
            "release",
            "GitHub repository or release not found",
        )
        if not isinstance(release, dict):
            raise BadResponseError("failed to parse GitHub release JSON: expected an object")
        tag_name = release.get("tag_name")
        if not tag_name:
            raise NoReleasesError(f"no releases found for GitHub repository: {self.repo}")
        return tag_name
