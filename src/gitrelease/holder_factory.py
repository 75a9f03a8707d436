"""Factory for holders."""

import logging
from collections import OrderedDict
from urllib.parse import urlparse

from gitrelease.config import get_config, resolve_token
from gitrelease.exceptions import BadProjectError
from gitrelease.repo_holders.bitbucket import BitBucketRepoSession
from gitrelease.repo_holders.github import GitHubRepoSession
from gitrelease.repo_holders.gitlab import GitLabRepoSession

log = logging.getLogger(__name__)


def unsupported_provider_message(provider):
    """Message shown when a provider name is not one of HolderFactory.HOLDERS."""
    supported = ", ".join(HolderFactory.HOLDERS)
    return f"Unsupported provider: {provider}. Supported providers are {supported}."


class HolderFactory:
    """Maps provider names and hostnames to project holder classes."""

    HOLDERS = OrderedDict(
        {
            "github": GitHubRepoSession,
            "gitlab": GitLabRepoSession,
            "bitbucket": BitBucketRepoSession,
        }
    )

    DEFAULT_HOLDER = "github"

    @staticmethod
    def get_holder_class(provider):
        """Look up a holder class by case-insensitive provider name."""
        holder_class = HolderFactory.HOLDERS.get(provider.lower())
        if not holder_class:
            raise BadProjectError(unsupported_provider_message(provider))
        return holder_class

    @staticmethod
    def guess_from_hostname(hostname):
        """Find the provider name whose domain matches a hostname."""
        for provider, holder_class in HolderFactory.HOLDERS.items():
            if holder_class.is_matching_hostname(hostname):
                log.info("Hostname %s belongs to %s", hostname, holder_class.PROVIDER_NAME)
                return provider
        raise BadProjectError(f"Could not find a provider for {hostname}, pass one explicitly")

    @staticmethod
    def get_instance_for_repo(repo, at=None, token=None, api_base=None, timeout=None):
        """
        Create the holder for a repository.

        The repo is either an identifier such as ``owner/name`` or a web link to
        the project, in which case the provider may be derived from its hostname.

        Args:
            repo (str): Repository identifier or link.
            at (str): Provider name; the configured default is used when omitted
                and the repo is not a link.
            token (str): Access token; falls back to the provider's environment variable.
            api_base (str): API base URL override.
            timeout (float): Per-request timeout override.
        """
        config = get_config()
        hostname = None
        # if repo is a link, get the hostname by parsing as URL
        if repo and repo.startswith(("http:", "https:")):
            parsed = urlparse(repo)
            # netloc keeps a non-standard port for self-hosted instances
            hostname = parsed.netloc
            repo = parsed.path
            if not at:
                at = HolderFactory.guess_from_hostname(hostname)

        provider = (at or config.default_provider).lower()
        holder_class = HolderFactory.get_holder_class(provider)

        if hostname:
            repo = holder_class.get_repo_from_link_path(repo)
            api_base = api_base or holder_class.api_base_for_hostname(hostname)

        return holder_class(
            repo,
            api_base=api_base or config.api_url(provider),
            token=resolve_token(token, holder_class.TOKEN_ENV_VAR),
            timeout=timeout or config.timeout,
            per_page=config.per_page,
        )
