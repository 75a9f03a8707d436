"""CLI entry point."""

import argparse
import json
import logging
import sys
from urllib.parse import urlparse

from gitrelease.__about__ import __banner__, __self__, __version__
from gitrelease.argparse_version import VersionAction
from gitrelease.config import get_config, reset_config
from gitrelease.exceptions import GitReleaseError
from gitrelease.gitrelease import latest
from gitrelease.holder_factory import HolderFactory, unsupported_provider_message

log = logging.getLogger("gitrelease")


def build_parser():
    """Create the argument parser of the CLI app."""
    parser = argparse.ArgumentParser(
        description="Find the latest release tag of a GitHub, GitLab or Bitbucket repository.",
        epilog="Tokens fall back to the GITHUB_TOKEN, GITLAB_TOKEN and BITBUCKET_TOKEN environment variables.",
        prog=__self__,
    )
    parser.add_argument(
        "repo",
        nargs="?",
        metavar="<repo or URL>",
        help="Repository in the format 'owner/repo' or 'namespace/project' for GitLab, "
        "or a link to it. 'owner/repo:8.2' is the same as --version-prefix 8.2",
    )
    parser.add_argument(
        "--repo",
        dest="repo_option",
        metavar="REPO",
        help="Same as the positional repository argument",
    )
    parser.add_argument(
        "-p",
        "--provider",
        metavar="{" + ",".join(HolderFactory.HOLDERS) + "}",
        help="Repository hosting, case-insensitive. Default: github, or guessed from a repository link",
    )
    parser.add_argument(
        "-b",
        "--version-prefix",
        "--branch",
        dest="version_prefix",
        metavar="PREFIX",
        help="Fetch the latest tag matching this version prefix, e.g. 8.2",
    )
    parser.add_argument(
        "--tag-prefix",
        dest="tag_prefix",
        metavar="TEXT",
        help="Literal text that version tags start with. Default: php-",
    )
    parser.add_argument("--github-token", dest="github_token", metavar="TOKEN", help="GitHub Personal Access Token")
    parser.add_argument("--gitlab-token", dest="gitlab_token", metavar="TOKEN", help="GitLab Personal Access Token")
    parser.add_argument("--bitbucket-token", dest="bitbucket_token", metavar="TOKEN", help="Bitbucket App Password")
    parser.add_argument(
        "--api-url",
        dest="api_url",
        metavar="URL",
        help="API base URL, e.g. https://gitlab.example.com/api/v4 for a self-hosted instance",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Timeout of each API request. Default: 10",
    )
    parser.add_argument(
        "--format",
        choices=["tag", "json"],
        help="Output format",
    )
    parser.add_argument(
        "--config",
        dest="config",
        metavar="FILE",
        help="Read settings from this YAML file instead of the default location",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Will give you an idea of what is happening under the hood, " "-vv to increase verbosity level",
    )
    parser.add_argument("--version", action=VersionAction)
    parser.set_defaults(format="tag")
    return parser


def print_usage(parser):
    """Print the program banner followed by usage."""
    print(f"{__self__} {__version__}")
    print(__banner__)
    print()
    parser.print_help()


def setup_logging(verbose):
    """Attach a console handler to the package logger."""
    # create console handler
    ch = logging.StreamHandler()
    fmt = "%(name)s - %(levelname)s - %(message)s" if verbose else "%(levelname)s: %(message)s"
    ch.setFormatter(logging.Formatter(fmt))
    log.addHandler(ch)
    if verbose:
        log.setLevel(logging.DEBUG if verbose >= 2 else logging.INFO)
        log.info("Verbose %s level output.", verbose)
    else:
        log.setLevel(logging.WARNING)
    return ch


def main(argv=None):
    """
    The entrypoint to CLI app.

    Args:
        argv: List of arguments, helps test CLI without resorting to subprocess module.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    repo = args.repo or args.repo_option
    if not repo:
        print_usage(parser)
        return sys.exit(1)

    handler = setup_logging(args.verbose)
    try:
        return run(args, repo)
    finally:
        log.removeHandler(handler)


def run(args, repo):
    """Resolve and print the tag for parsed arguments."""
    if args.config:
        reset_config()
        get_config(args.config)

    # "expand" repo:8.2 as repo --version-prefix 8.2
    # noinspection HttpUrlsUsage
    if ":" in repo and "/" not in repo.rsplit(":", 1)[1]:
        # right split ':' once only to preserve it in protocol of URLs
        repo, args.version_prefix = repo.rsplit(":", 1)

    if args.provider and args.provider.lower() not in HolderFactory.HOLDERS:
        log.critical(unsupported_provider_message(args.provider))
        return sys.exit(1)

    tokens = {
        "github": args.github_token,
        "gitlab": args.gitlab_token,
        "bitbucket": args.bitbucket_token,
    }
    # a link picks the provider by hostname; the flag token then belongs to it
    if args.provider:
        provider = args.provider.lower()
    elif repo.startswith(("http:", "https:")):
        provider = None
    else:
        provider = get_config().default_provider.lower()

    try:
        if provider is None:
            provider = HolderFactory.guess_from_hostname(urlparse(repo).netloc)
        res = latest(
            repo,
            provider=provider,
            version_prefix=args.version_prefix,
            token=tokens.get(provider),
            api_base=args.api_url,
            tag_prefix=args.tag_prefix,
            timeout=args.timeout,
            output_format="dict" if args.format == "json" else "tag",
        )
    except GitReleaseError as error:
        log.critical("Error fetching latest release/tag: %s", error)
        return sys.exit(1)

    if args.format == "json":
        json.dump(res, sys.stdout)
        print()
    else:
        print(res)
    return sys.exit(0)
