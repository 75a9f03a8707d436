"""BitBucket repository session."""

import logging

from gitrelease.exceptions import BadResponseError, NoReleasesError
from gitrelease.repo_holders.base import PAGINATION_NEXT_LINK, BaseProjectHolder

log = logging.getLogger(__name__)


class BitBucketRepoSession(BaseProjectHolder):
    """BitBucket repository session."""

    PROVIDER_NAME = "Bitbucket"
    DEFAULT_HOSTNAME = "bitbucket.org"
    DEFAULT_API_BASE = "https://api.bitbucket.org/2.0"
    TOKEN_ENV_VAR = "BITBUCKET_TOKEN"

    REPO_URL_PROJECT_COMPONENTS = 2
    STRICT_REPO_FORMAT = True

    PAGINATION = PAGINATION_NEXT_LINK
    PAGE_SIZE_PARAM = "pagelen"

    def auth_headers(self, token):
        return {"Authorization": f"Bearer {token}"}

    def tags_url(self):
        owner, repo_name = self.repo.split("/")
        return f"{self.api_base}/repositories/{owner}/{repo_name}/refs/tags"

    def page_tag_names(self, data):
        if not isinstance(data, dict):
            raise BadResponseError("failed to parse Bitbucket tags JSON: expected an object")
        return self.names_from_records(data.get("values") or [])

    def next_page_url(self, data):
        return data.get("next") or None

    def get_latest_release(self):
        """Get the first tag of the default tag listing.

        Bitbucket has no notion of releases, so the first ref of
        /refs/tags stands in for the latest one.
        """
        data = self.fetch_json(self.tags_url(), "tags", self.tags_not_found_message())
        names = self.page_tag_names(data)
        if not names:
            raise NoReleasesError(f"no tags found for Bitbucket repository: {self.repo}")
        return names[0]
