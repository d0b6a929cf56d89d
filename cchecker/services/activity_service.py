import logging
from datetime import UTC
from datetime import datetime

import httpx

from cchecker.clients.github_client import fetch_commit_dates
from cchecker.clients.github_client import fetch_contributors
from cchecker.schemas.activity import CommitEvent
from cchecker.schemas.activity import Contributor


logger = logging.getLogger(__name__)

GITHUB_TIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ActivityFetchError(GitHubAPIError):
    """Raised when the commit history of one year cannot be fetched."""

    def __init__(self, year: int, status_code: int | None = None) -> None:
        detail = f"status code {status_code}" if status_code else "request failed"
        super().__init__(
            f"Could not fetch activity for {year} ({detail})", status_code
        )
        self.year = year


def parse_github_datetime(raw_value: str) -> datetime:
    parsed = datetime.fromisoformat(raw_value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def year_bounds(year: int, now: datetime) -> tuple[str, str]:
    """Return the `since`/`until` query values for one calendar year."""

    since = f"{year}-01-01T00:00:00Z"
    if year == now.year:
        until = now.astimezone(UTC).strftime(GITHUB_TIME_FORMAT)
    else:
        until = f"{year}-12-31T23:59:59Z"
    return since, until


async def get_contributors(client: httpx.AsyncClient, repo: str) -> list[Contributor]:
    """Return the contributors of `repo`, failing on any non-success status."""

    try:
        raw_contributors = await fetch_contributors(client, repo)
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        logger.error("Contributors request for %s failed: %s", repo, status_code)
        raise GitHubAPIError(
            f"Could not fetch contributors (status code {status_code})", status_code
        ) from exc
    except (httpx.HTTPError, ValueError) as exc:
        logger.error("Contributors request for %s failed: %s", repo, exc)
        raise GitHubAPIError(f"Could not fetch contributors ({exc})") from exc

    return [Contributor.model_validate(item) for item in raw_contributors]


async def fetch_contributor_activity(
    client: httpx.AsyncClient,
    repo: str,
    username: str,
    now: datetime | None = None,
    first_year: int = 2000,
    per_page: int = 100,
) -> list[CommitEvent]:
    """Collect commit events of `username` one calendar year at a time.

    Years are queried from the current one back to `first_year`. An empty or
    404 response counts as a year without commits; any other failure aborts
    the whole fetch.

    Raises:
        ActivityFetchError: If a year's request fails for another reason.
    """

    now = now or datetime.now(UTC)
    events: list[CommitEvent] = []

    for year in range(now.year, first_year - 1, -1):
        since, until = year_bounds(year, now)
        logger.debug("Fetching %s commits by %s in %s", repo, username, year)
        try:
            raw_dates = await fetch_commit_dates(
                client,
                repo,
                author=username,
                since=since,
                until=until,
                per_page=per_page,
            )
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code == httpx.codes.NOT_FOUND:
                logger.debug("No commit history for %s in %s", username, year)
                continue
            logger.error("Activity request for %s failed: %s", year, status_code)
            raise ActivityFetchError(year, status_code) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Activity request for %s failed: %s", year, exc)
            raise ActivityFetchError(year) from exc

        for raw_date in raw_dates:
            try:
                committed_at = parse_github_datetime(raw_date)
            except ValueError:
                logger.debug("Skipping malformed commit date %r", raw_date)
                continue
            events.append(CommitEvent(author=username, committed_at=committed_at))

    logger.info("Fetched %d commits by %s in %s", len(events), username, repo)
    return events
