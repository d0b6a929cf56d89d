import argparse
import asyncio
import logging
import sys
from datetime import UTC
from datetime import datetime
from typing import TextIO

import httpx

from cchecker.clients.github_client import create_client
from cchecker.core.observability import configure_logging
from cchecker.core.observability import init_sentry
from cchecker.core.prompt import LineReader
from cchecker.core.prompt import prompt_for_contributor
from cchecker.services.activity_service import GitHubAPIError
from cchecker.services.activity_service import fetch_contributor_activity
from cchecker.services.activity_service import get_contributors
from cchecker.services.heatmap_service import build_year_matrices
from cchecker.services.render_service import render_contributors
from cchecker.services.render_service import render_heatmap
from cchecker.services.repo_resolver import RepoResolutionError
from cchecker.services.repo_resolver import resolve_repo
from cchecker.settings import Settings


logger = logging.getLogger("cchecker")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cchecker",
        description="List GitHub repository contributors and show commit heatmaps.",
    )
    parser.add_argument(
        "repo", nargs="?", help="GitHub repository, e.g. 'rust-lang/rust'"
    )
    parser.add_argument(
        "contributor", nargs="?", help="Username of a specific contributor"
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Print the heatmap without ANSI colors"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log requests to stderr"
    )
    return parser


async def run(
    repo_arg: str | None,
    contributor_arg: str | None,
    settings: Settings,
    reader: LineReader = input,
    out: TextIO = sys.stdout,
    err: TextIO = sys.stderr,
    color: bool = True,
    now: datetime | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run one contributors query and optional heatmap report.

    Returns the process exit status.
    """

    try:
        repo = resolve_repo(repo_arg, host=settings.github_host)
    except RepoResolutionError as exc:
        print(exc, file=err)
        return 1

    print(f"Querying GitHub repository: {repo}", file=out)

    async with create_client(
        settings.github_api_base_url,
        settings.user_agent,
        timeout=settings.request_timeout,
        transport=transport,
    ) as client:
        try:
            contributors = await get_contributors(client, repo)
        except GitHubAPIError as exc:
            print(f"Request failed: {exc}", file=err)
            return 1

        render_contributors(contributors, out)

        username = contributor_arg or prompt_for_contributor(reader, out)
        if not username:
            return 0

        now = now or datetime.now(UTC)
        try:
            events = await fetch_contributor_activity(
                client,
                repo,
                username,
                now=now,
                first_year=settings.first_year,
                per_page=settings.commits_per_page,
            )
        except GitHubAPIError as exc:
            print(f"Failed to fetch contributor activity: {exc}", file=err)
            return 1

    if not events:
        print(f"No contributions found for {username}", file=out)
        return 0

    render_heatmap(
        username,
        build_year_matrices(events, now=now),
        out,
        now=now,
        label=settings.report_label,
        color=color,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings()

    configure_logging(logging.DEBUG if args.verbose else settings.log_level.upper())
    init_sentry(settings)

    try:
        return asyncio.run(
            run(args.repo, args.contributor, settings, color=not args.no_color)
        )
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        print("\nOperation cancelled by user", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
