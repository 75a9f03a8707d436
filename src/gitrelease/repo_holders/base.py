"""The base project holder class."""

import logging

import requests

from gitrelease.exceptions import (
    ApiError,
    BadProjectError,
    BadResponseError,
    FetchError,
    RateLimitError,
    RepoNotFoundError,
)
from gitrelease.utils import retry_after_seconds
from gitrelease.version import DEFAULT_TAG_PREFIX, resolve_latest_tag

log = logging.getLogger(__name__)

# Tag listing is walked with ?page=1,2,... until a short or empty page
PAGINATION_PAGE_NUMBER = "page"
# Tag listing returns the URL of the following page until there is none
PAGINATION_NEXT_LINK = "next"


class BaseProjectHolder(requests.Session):
    """
    Generic project holder class abstracts a web-accessible project storage.
    E.g., project on GitHub, project on Gitlab, etc.

    Subclasses describe their provider with class attributes (API base, auth
    header, pagination style) and implement the URL builders and the
    single-release lookup. Everything else, from HTTP error translation to
    walking tag pages, lives here.
    """

    # Human-readable provider name used in error messages
    PROVIDER_NAME = None
    # web-accessible project holders may have a single well-known domain usable by everyone
    DEFAULT_HOSTNAME = None
    SUBDOMAIN_INDICATOR = None
    DEFAULT_API_BASE = None
    # API base of a self-hosted instance; None means self-hosting is not supported
    SELF_HOSTED_API_FORMAT = None
    TOKEN_ENV_VAR = None

    # e.g. owner/project; True means as many as given in URI
    REPO_URL_PROJECT_COMPONENTS = 2
    # Reject identifiers that do not have exactly REPO_URL_PROJECT_COMPONENTS parts
    STRICT_REPO_FORMAT = False

    PAGINATION = PAGINATION_PAGE_NUMBER
    PAGE_SIZE_PARAM = "per_page"
    DEFAULT_PER_PAGE = 100
    # largest page any of the hosted APIs returns
    MAX_PER_PAGE = 100
    DEFAULT_TIMEOUT = 10  # default timeout in seconds

    USER_AGENT = "gitrelease-cli"

    def __init__(self, repo, api_base=None, token=None, timeout=None, per_page=None):
        super().__init__()
        self.repo = self.get_base_repo_from_repo_arg(repo)
        self.api_base = (api_base or self.DEFAULT_API_BASE).rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.per_page = min(max(per_page or self.DEFAULT_PER_PAGE, 1), self.MAX_PER_PAGE)
        if per_page and per_page != self.per_page:
            log.warning("Page size %s is out of range, using %s", per_page, self.per_page)
        self.headers.update({"User-Agent": self.USER_AGENT})
        if token:
            self.headers.update(self.auth_headers(token))
        log.info("Created instance of %s for %s at %s", type(self).__name__, self.repo, self.api_base)

    def request(self, *args, **kwargs):
        """Set default timeout for requests."""
        kwargs.setdefault("timeout", self.timeout)
        return super().request(*args, **kwargs)

    def auth_headers(self, token):
        """Headers that authenticate API requests with the given token."""
        raise NotImplementedError

    @classmethod
    def get_base_repo_from_repo_arg(cls, repo_arg):
        """Validate a repository identifier for this provider."""
        if not repo_arg:
            raise BadProjectError(f"No repository given for {cls.PROVIDER_NAME}")
        if cls.STRICT_REPO_FORMAT and len(repo_arg.split("/")) != cls.REPO_URL_PROJECT_COMPONENTS:
            raise BadProjectError(f"invalid {cls.PROVIDER_NAME} repository format. Expected 'owner/repo'")
        return repo_arg

    @classmethod
    def get_repo_from_link_path(cls, path):
        """Return meaningful URI components from the path of a web link."""
        url_parts = [part for part in path.split("/") if part]
        if cls.REPO_URL_PROJECT_COMPONENTS is True:
            return "/".join(url_parts)
        return "/".join(url_parts[: cls.REPO_URL_PROJECT_COMPONENTS])

    @classmethod
    def is_matching_hostname(cls, hostname):
        """Check if given hostname matches to the project hosting's domains.

        Args:
            hostname: May include port (netloc format) for non-standard ports.
        """
        if not hostname:
            return None
        hostname_only = hostname.rsplit(":", 1)[0].lower()
        if cls.DEFAULT_HOSTNAME == hostname_only:
            return True
        if cls.SUBDOMAIN_INDICATOR and hostname_only.startswith(cls.SUBDOMAIN_INDICATOR + "."):
            return True
        return False

    @classmethod
    def api_base_for_hostname(cls, hostname):
        """Get the API base for a repository linked at the given hostname.

        Returns None for the provider's own domain, meaning the default API base.
        """
        if not hostname or hostname.rsplit(":", 1)[0].lower() == cls.DEFAULT_HOSTNAME:
            return None
        if not cls.SELF_HOSTED_API_FORMAT:
            raise BadProjectError(f"{cls.PROVIDER_NAME} cannot be self-hosted at {hostname}")
        return cls.SELF_HOSTED_API_FORMAT.format(hostname=hostname)

    def get_canonical_link(self):
        """Get the canonical link for a project."""
        return f"https://{self.DEFAULT_HOSTNAME}/{self.repo}"

    def rate_limit_error(self, response):
        """Return a RateLimitError if the response signals an exhausted quota.

        The default recognizes HTTP 429 with an optional Retry-After header.
        """
        if response.status_code != 429:
            return None
        message = f"{self.PROVIDER_NAME} rate limit exceeded."
        seconds = retry_after_seconds(response.headers.get("Retry-After"))
        if seconds is not None:
            message = f"{message} Retry after {seconds} seconds"
        return RateLimitError(message)

    def fetch_json(self, url, what, not_found, params=None):
        """Send GET request and return decoded JSON, translating failures.

        Args:
            url (str): Full API URL.
            what (str): What is being fetched, e.g. "tags", used in messages.
            not_found (str): Message used when the API answers 404.
            params (dict): Optional query parameters.

        Raises:
            FetchError, RateLimitError, RepoNotFoundError, ApiError, BadResponseError
        """
        try:
            response = self.get(url, params=params)
        except requests.RequestException as e:
            raise FetchError(f"failed to fetch {self.PROVIDER_NAME} {what}: {e}") from e
        log.info("Got HTTP status code %s from %s", response.status_code, response.url or url)

        error = self.rate_limit_error(response)
        if error:
            raise error
        if response.status_code == 404:
            raise RepoNotFoundError(f"{not_found}: {self.repo}")
        if response.status_code != 200:
            status = f"{response.status_code} {response.reason}" if response.reason else str(response.status_code)
            raise ApiError(f"{self.PROVIDER_NAME} API error: {status}")

        try:
            return response.json()
        except ValueError as e:
            raise BadResponseError(f"failed to parse {self.PROVIDER_NAME} {what} JSON: {e}") from e

    def names_from_records(self, records, key="name", what="tags"):
        """Pluck a string field out of every record of a JSON array."""
        if not isinstance(records, list):
            raise BadResponseError(f"failed to parse {self.PROVIDER_NAME} {what} JSON: expected a list")
        names = []
        for record in records:
            if not isinstance(record, dict) or not isinstance(record.get(key), str):
                raise BadResponseError(f"failed to parse {self.PROVIDER_NAME} {what} JSON: record without {key}")
            names.append(record[key])
        return names

    def tags_url(self):
        """URL of the first page of the tag listing."""
        raise NotImplementedError

    def tags_not_found_message(self):
        return f"{self.PROVIDER_NAME} repository not found"

    def page_tag_names(self, data):
        """Tag names contained in one decoded page of the tag listing."""
        return self.names_from_records(data)

    def next_page_url(self, data):
        """URL of the following page for next-link pagination, or None."""
        return None

    def get_all_tags(self):
        """Fetch tag names across all pages of the tag listing.

        Returns:
            list: Tag names in the order the provider returned them.
        """
        if self.PAGINATION == PAGINATION_NEXT_LINK:
            all_tags = self._collect_linked_pages()
        else:
            all_tags = self._collect_numbered_pages()
        log.info("Fetched %d tags for %s", len(all_tags), self.repo)
        return all_tags

    def _collect_numbered_pages(self):
        all_tags = []
        page = 1
        while True:
            params = {self.PAGE_SIZE_PARAM: self.per_page, "page": page}
            data = self.fetch_json(self.tags_url(), "tags", self.tags_not_found_message(), params=params)
            tags = self.page_tag_names(data)
            log.debug("Page %d has %d tags", page, len(tags))
            if not tags:
                break
            all_tags.extend(tags)
            if len(tags) < self.per_page:
                break
            page += 1
        return all_tags

    def _collect_linked_pages(self):
        all_tags = []
        url = self.tags_url()
        params = {self.PAGE_SIZE_PARAM: self.per_page}
        while url:
            data = self.fetch_json(url, "tags", self.tags_not_found_message(), params=params)
            tags = self.page_tag_names(data)
            log.debug("Page %s has %d tags", url, len(tags))
            if not tags:
                break
            all_tags.extend(tags)
            # the next link already carries every query parameter
            url = self.next_page_url(data)
            params = None
        return all_tags

    def get_latest_release(self):
        """Get the latest release tag as ordered by the provider itself."""
        raise NotImplementedError

    def get_latest_tag(self, version_prefix, tag_prefix=DEFAULT_TAG_PREFIX):
        """Get the highest semver tag matching a version prefix."""
        return resolve_latest_tag(self.get_all_tags(), version_prefix, tag_prefix)

    def get_latest(self, version_prefix=None, tag_prefix=DEFAULT_TAG_PREFIX):
        """Get the latest release.

        Args:
            version_prefix (str): When given, walk all tags and pick the
                highest semantic version starting with it. Otherwise trust the
                provider's own notion of the latest release.
            tag_prefix (str): Literal text every version tag starts with.

        Returns:
            str: Tag name.
        """
        if version_prefix:
            return self.get_latest_tag(version_prefix, tag_prefix)
        return self.get_latest_release()
