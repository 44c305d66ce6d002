"""Command-line access to GitHub commit statuses.

Usage::

    ghstatus list OWNER/REPO REF
    ghstatus combined OWNER/REPO REF
    ghstatus create OWNER/REPO SHA --state pending --context ci/build

Results are written to stdout as JSON. Connection settings come from the
``GHSTATUS_*`` environment variables read by :class:`GitHubConfig`.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
import typing as typ

import msgspec

from ghstatus.config import GitHubConfig
from ghstatus.errors import GitHubConfigError
from ghstatus.logging import configure_logging, get_logger, log_warning
from ghstatus.slug import parse_repo_slug
from ghstatus.statuses import (
    CommitState,
    CommitStatusClient,
    CommitStatusError,
    NewCommitStatus,
)
from ghstatus.transport import HttpxTransport

logger = get_logger(__name__)

TransportFactory = typ.Callable[[GitHubConfig], HttpxTransport]


def _repo_slug(value: str) -> tuple[str, str]:
    try:
        return parse_repo_slug(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghstatus", description="Read and report GitHub commit statuses."
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("GHSTATUS_LOG_LEVEL", "INFO"),
        help="Log level (default: GHSTATUS_LOG_LEVEL or INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List every status for a ref")
    list_cmd.add_argument("repo", type=_repo_slug, help="Repository as owner/name")
    list_cmd.add_argument("ref", help="SHA, branch, or tag")
    list_cmd.add_argument("--per-page", type=int, default=100)
    list_cmd.add_argument("--max-pages", type=int, default=None)

    combined_cmd = commands.add_parser(
        "combined", help="Show the combined status for a ref"
    )
    combined_cmd.add_argument(
        "repo", type=_repo_slug, help="Repository as owner/name"
    )
    combined_cmd.add_argument("ref", help="SHA, branch, or tag")

    create_cmd = commands.add_parser("create", help="Report a status on a commit")
    create_cmd.add_argument("repo", type=_repo_slug, help="Repository as owner/name")
    create_cmd.add_argument("sha", help="Commit SHA")
    create_cmd.add_argument(
        "--state",
        required=True,
        type=CommitState,
        choices=list(CommitState),
        help="Reported state",
    )
    create_cmd.add_argument("--context", default=None)
    create_cmd.add_argument("--description", default=None)
    create_cmd.add_argument("--target-url", default=None)
    return parser


async def _run(args: argparse.Namespace, client: CommitStatusClient) -> object:
    owner, repo = args.repo
    if args.command == "list":
        return await client.get_all(
            owner, repo, args.ref, per_page=args.per_page, max_pages=args.max_pages
        )
    if args.command == "combined":
        return await client.get_combined(owner, repo, args.ref)
    new_status = NewCommitStatus(
        state=args.state,
        context=args.context,
        description=args.description,
        target_url=args.target_url,
    )
    return await client.create(owner, repo, args.sha, new_status)


async def _execute(
    args: argparse.Namespace, transport_factory: TransportFactory
) -> object:
    async with transport_factory(GitHubConfig.from_env()) as transport:
        return await _run(args, CommitStatusClient(transport))


def main(
    argv: list[str] | None = None,
    *,
    transport_factory: TransportFactory = HttpxTransport,
) -> int:
    """Run the ``ghstatus`` command.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.
    transport_factory : TransportFactory, optional
        Builds the transport from the environment configuration.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the request or configuration failed.

    """
    args = _build_parser().parse_args(argv)

    normalized_level, invalid_level = configure_logging(args.log_level)
    if invalid_level:
        log_warning(
            logger,
            "Invalid log level %r, falling back to %s",
            args.log_level,
            normalized_level,
        )

    try:
        result = asyncio.run(_execute(args, transport_factory))
    except (CommitStatusError, GitHubConfigError) as exc:
        print(f"ghstatus: {exc}", file=sys.stderr)
        return 1

    print(msgspec.json.encode(result).decode("utf-8"))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
