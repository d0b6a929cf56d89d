import logging
import subprocess
from collections.abc import Callable


logger = logging.getLogger(__name__)


class RepoResolutionError(Exception):
    """Raised when no repository can be determined for the query."""


def get_git_remote() -> str | None:
    """Return the URL of the local `origin` remote, if any."""

    try:
        result = subprocess.run(
            ["git", "remote", "get-url", "origin"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        logger.debug("git is not available: %s", exc)
        return None

    if result.returncode != 0:
        logger.debug("git remote lookup failed: %s", result.stderr.strip())
        return None

    url = result.stdout.strip()
    return url or None


def parse_github_repo(url: str, host: str = "github.com") -> str | None:
    """Extract `owner/repo` from an HTTPS or SSH remote URL."""

    position = url.find(host)
    if position == -1:
        return None

    # Skip the host plus its separator: "/" for HTTPS, ":" for SSH.
    repo = url[position + len(host) + 1 :].strip()
    repo = repo.removesuffix(".git")
    return repo or None


def resolve_repo(
    explicit: str | None,
    read_remote: Callable[[], str | None] | None = None,
    host: str = "github.com",
) -> str:
    """Return the explicit repository or derive it from the git remote.

    Raises:
        RepoResolutionError: If there is no remote or it is not a GitHub URL.
    """

    if explicit:
        return explicit

    url = (read_remote or get_git_remote)()
    if url is None:
        raise RepoResolutionError(
            "Could not read the git remote; run inside a git repository or pass a repo"
        )

    repo = parse_github_repo(url, host=host)
    if repo is None:
        raise RepoResolutionError(
            f"Could not parse a GitHub repository from remote {url!r}; pass it explicitly"
        )

    logger.debug("Resolved repository %s from remote %s", repo, url)
    return repo
