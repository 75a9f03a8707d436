"""Version-aware tag resolution.

A list of raw tag names is narrowed down to the single latest tag in three
steps: keep the tags that start with ``<tag prefix><version prefix>``, parse
what follows the tag prefix as a semantic version, and sort by semver
precedence, highest first.

Examples:
    >>> resolve_latest_tag(["php-8.2.1", "php-8.2.26", "php-7.4.0"], "8.2")
    'php-8.2.26'
"""

import logging
import re

from semver import Version

from gitrelease.exceptions import NoMatchingTagsError, NoSemverTagsError

log = logging.getLogger(__name__)

DEFAULT_TAG_PREFIX = "php-"


def tag_version_pattern(tag_prefix=DEFAULT_TAG_PREFIX):
    """Compile the pattern that captures the version part of a tag name."""
    return re.compile(rf"^{re.escape(tag_prefix)}(v?[\d.]+.*)$")


def parse_tag_version(tag, tag_prefix=DEFAULT_TAG_PREFIX, pattern=None):
    """Extract a semantic version from a tag name.

    The tag prefix is stripped, then an optional leading ``v``. Shorthand
    versions like ``8.2`` are accepted and read as ``8.2.0``.

    Args:
        tag (str): Tag name, e.g. ``php-8.2.26``.
        tag_prefix (str): Literal text preceding the version in the tag.
        pattern (re.Pattern): Precompiled result of `tag_version_pattern`.

    Returns:
        semver.Version or None: None when the tag does not carry a valid version.
    """
    if pattern is None:
        pattern = tag_version_pattern(tag_prefix)
    match = pattern.match(tag)
    if not match:
        log.debug("Tag %s does not look like %s<version>", tag, tag_prefix)
        return None
    version_s = match.group(1)
    if version_s.startswith("v"):
        version_s = version_s[1:]
    # strict semver: parts with leading zeros such as 8.02.1 are rejected
    try:
        return Version.parse(version_s, optional_minor_and_patch=True)
    except ValueError:
        log.info("Failed to parse %s as semantic version, skipping tag %s.", version_s, tag)
        return None


def filter_tags_by_prefix(tags, version_prefix, tag_prefix=DEFAULT_TAG_PREFIX):
    """Return tags starting with the tag prefix followed by the version prefix."""
    match_prefix = f"{tag_prefix}{version_prefix}"
    filtered = [tag for tag in tags if tag.startswith(match_prefix)]
    log.info("%d of %d tags start with %s", len(filtered), len(tags), match_prefix)
    return filtered


def sort_tags_by_version(tags, tag_prefix=DEFAULT_TAG_PREFIX):
    """Sort tags in descending semantic version order.

    Tags without a parseable version are dropped.

    Raises:
        NoSemverTagsError: When none of the tags parse.
    """
    pattern = tag_version_pattern(tag_prefix)
    versioned = []
    for tag in tags:
        version = parse_tag_version(tag, tag_prefix, pattern=pattern)
        if version is not None:
            versioned.append((version, tag))

    if not versioned:
        raise NoSemverTagsError("no semver-compatible tags found")

    versioned.sort(key=lambda pair: pair[0], reverse=True)
    return [tag for _, tag in versioned]


def resolve_latest_tag(tags, version_prefix, tag_prefix=DEFAULT_TAG_PREFIX):
    """Pick the highest semver tag among those matching a version prefix.

    Args:
        tags (list): All tag names fetched from a provider. Not modified.
        version_prefix (str): User supplied version prefix, e.g. ``8.2``.
        tag_prefix (str): Literal text every version tag starts with.

    Raises:
        NoMatchingTagsError: When no tag matches the prefix.
        NoSemverTagsError: When matching tags exist but none parse.

    Returns:
        str: The latest tag name.
    """
    filtered = filter_tags_by_prefix(tags, version_prefix, tag_prefix)
    if not filtered:
        raise NoMatchingTagsError(f"no tags found for version prefix: {version_prefix}")
    latest_tag = sort_tags_by_version(filtered, tag_prefix)[0]
    log.info("Latest tag for version prefix %s is %s", version_prefix, latest_tag)
    return latest_tag
