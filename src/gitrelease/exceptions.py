"""Custom exceptions for gitrelease."""


class GitReleaseError(Exception):
    """Base class for every error that aborts a resolution."""


class BadProjectError(GitReleaseError):
    """Raised when a repository identifier is not usable for a provider"""


class FetchError(GitReleaseError):
    """Raised when a request could not be built or the network call failed"""


class RepoNotFoundError(GitReleaseError):
    """Raised when the provider answers 404 for a repository"""


class RateLimitError(GitReleaseError):
    """Raised when the provider reports an exhausted API quota"""


class ApiError(GitReleaseError):
    """Raised on any other non-success HTTP status"""


class BadResponseError(GitReleaseError):
    """Raised when a response body is not JSON of the expected shape"""


class NoReleasesError(GitReleaseError):
    """Raised when a repository has no releases or tags at all"""


class NoMatchingTagsError(GitReleaseError):
    """Raised when no tag starts with the requested version prefix"""


class NoSemverTagsError(GitReleaseError):
    """Raised when prefix-matching tags exist but none parse as semver"""
