import logging
from collections.abc import Mapping
from typing import Any

import httpx


logger = logging.getLogger(__name__)


def create_client(
    api_base_url: str,
    user_agent: str,
    timeout: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the shared async client used for every GitHub REST request."""

    return httpx.AsyncClient(
        base_url=api_base_url,
        headers={
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
        },
        timeout=timeout,
        transport=transport,
    )


def _json_list(response: httpx.Response, what: str) -> list[Any]:
    if not response.content.strip():
        return []

    payload: Any = response.json()
    if not isinstance(payload, list):
        raise ValueError(f"GitHub {what} response is invalid")
    return payload


async def fetch_contributors(
    client: httpx.AsyncClient, repo: str
) -> list[dict[str, str | int]]:
    """Fetch the first page of contributors for `owner/name` from GitHub REST API."""

    response = await client.get(f"/repos/{repo}/contributors")
    response.raise_for_status()

    contributors: list[dict[str, str | int]] = []
    for item in _json_list(response, "contributors"):
        if not isinstance(item, Mapping):
            continue
        raw_login = item.get("login")
        raw_count = item.get("contributions")
        if not isinstance(raw_login, str) or not raw_login:
            continue
        contributors.append(
            {
                "login": raw_login,
                "contributions": raw_count if isinstance(raw_count, int) else 0,
            }
        )

    return contributors


async def fetch_commit_dates(
    client: httpx.AsyncClient,
    repo: str,
    author: str,
    since: str,
    until: str,
    per_page: int = 100,
) -> list[str]:
    """Fetch one page of commit author dates for `author` within a time range.

    Records without a string `commit.author.date` are left out.
    """

    response = await client.get(
        f"/repos/{repo}/commits",
        params={
            "author": author,
            "per_page": per_page,
            "since": since,
            "until": until,
        },
    )
    response.raise_for_status()

    dates: list[str] = []
    for item in _json_list(response, "commits"):
        if not isinstance(item, Mapping):
            continue
        commit = item.get("commit")
        if not isinstance(commit, Mapping):
            continue
        commit_author = commit.get("author")
        if not isinstance(commit_author, Mapping):
            continue
        raw_date = commit_author.get("date")
        if isinstance(raw_date, str):
            dates.append(raw_date)
        else:
            logger.debug("Skipping commit without author date: %s", item.get("sha"))

    return dates
