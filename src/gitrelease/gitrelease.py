"""Resolve the latest release tag of a repository."""

import logging

from gitrelease.config import get_config
from gitrelease.holder_factory import HolderFactory

log = logging.getLogger(__name__)


def latest(
    repo,
    provider=None,
    version_prefix=None,
    token=None,
    api_base=None,
    tag_prefix=None,
    timeout=None,
    output_format="tag",
):
    """Find the latest release tag for a repository.

    Without a version prefix the provider's own idea of the latest release is
    trusted: GitHub's "latest release", the first of GitLab's releases, the
    first of Bitbucket's tags. With a version prefix every tag is fetched and
    the highest semantic version among ``<tag_prefix><version_prefix>*`` wins.

    Args:
        repo (str): Repository identifier (``owner/name``, ``group/sub/project``)
                    or a web link to the repository.
        provider (str): ``github``, ``gitlab`` or ``bitbucket``, case-insensitive.
                        Guessed from the hostname for links, otherwise the
                        configured default.
        version_prefix (str): Only consider tags of this version, e.g. ``8.2``.
        token (str): Access token; the provider's environment variable is used
                     when omitted.
        api_base (str): Override the API base URL, e.g. for self-hosted instances.
        tag_prefix (str): Literal text version tags start with, ``php-`` unless configured.
        timeout (float): Seconds to wait for each request.
        output_format (str): ``tag`` for the tag string, ``dict`` for a dict with
                             provider, repo and tag name.

    Examples:
        >>> latest("php/php-src", version_prefix="8.2")
        'php-8.2.26'

    Raises:
        GitReleaseError: Any failure; nothing is retried.

    Returns:
        Union[str, dict]: The latest tag, or its description for ``dict`` format.
    """
    config = get_config()
    if tag_prefix is None:
        tag_prefix = config.tag_prefix

    with HolderFactory.get_instance_for_repo(
        repo, at=provider, token=token, api_base=api_base, timeout=timeout
    ) as project:
        tag = project.get_latest(version_prefix, tag_prefix)
        log.info("Located the latest release tag %s at: %s", tag, project.get_canonical_link())

        if output_format == "dict":
            return {
                "provider": project.PROVIDER_NAME.lower(),
                "repo": project.repo,
                "tag_name": tag,
            }
    return tag
