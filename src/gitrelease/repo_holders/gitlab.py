"""GitLab repo session."""

import logging
from urllib.parse import quote

from gitrelease.exceptions import NoReleasesError
from gitrelease.repo_holders.base import PAGINATION_PAGE_NUMBER, BaseProjectHolder

log = logging.getLogger(__name__)


class GitLabRepoSession(BaseProjectHolder):
    """GitLab repo session."""

    PROVIDER_NAME = "GitLab"
    DEFAULT_HOSTNAME = "gitlab.com"
    # Domains gitlab.example.com
    SUBDOMAIN_INDICATOR = "gitlab"
    DEFAULT_API_BASE = "https://gitlab.com/api/v4"
    SELF_HOSTED_API_FORMAT = "https://{hostname}/api/v4"
    TOKEN_ENV_VAR = "GITLAB_TOKEN"

    # GitLab has unlimited nesting in subgroups
    REPO_URL_PROJECT_COMPONENTS = True

    PAGINATION = PAGINATION_PAGE_NUMBER

    def auth_headers(self, token):
        return {"PRIVATE-TOKEN": token}

    @classmethod
    def get_repo_from_link_path(cls, path):
        # /group/project/-/releases could be passed,
        # everything starting at /-/ is not part of the project path
        return super().get_repo_from_link_path(path.split("/-/")[0])

    def repo_url(self, uri):
        """API URL under the project, addressed by its encoded full path."""
        repo_enc = quote(self.repo, safe="")
        return f"{self.api_base}/projects/{repo_enc}{uri}"

    def tags_url(self):
        return self.repo_url("/repository/tags")

    def get_latest_release(self):
        """Get the tag of the first release GitLab lists.

        GitLab returns releases sorted by release date, newest first.
        """
        releases = self.fetch_json(
            self.repo_url("/releases"),
            "releases",
            "GitLab repository or releases not found",
        )
        names = self.names_from_records(releases, key="tag_name", what="releases")
        if not names:
            raise NoReleasesError(f"no releases found for GitLab repository: {self.repo}")
        return names[0]
