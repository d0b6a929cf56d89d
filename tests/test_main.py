import asyncio
import io
from datetime import UTC
from datetime import datetime

import httpx
import pytest

from cchecker.main import build_parser
from cchecker.main import main
from cchecker.main import run
from cchecker.settings import Settings


NOW = datetime(2022, 3, 15, 8, 30, tzinfo=UTC)

CONTRIBUTORS = [
    {"login": "octocat", "contributions": 3},
    {"login": "hubot", "contributions": 1},
]


def commit_record(raw_date: str) -> dict[str, object]:
    return {"commit": {"author": {"date": raw_date}}}


class FakeGitHub:
    """Serve canned contributors and per-year commit pages."""

    def __init__(
        self,
        commits_by_year: dict[str, list[dict[str, object]]] | None = None,
        status_by_year: dict[str, int] | None = None,
        contributors_status: int = 200,
    ) -> None:
        self.commits_by_year = commits_by_year or {}
        self.status_by_year = status_by_year or {}
        self.contributors_status = contributors_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path.endswith("/contributors"):
            if self.contributors_status != 200:
                return httpx.Response(self.contributors_status)
            return httpx.Response(200, json=CONTRIBUTORS)

        year = request.url.params["since"][:4]
        status = self.status_by_year.get(year, 200)
        if status != 200:
            return httpx.Response(status)
        return httpx.Response(200, json=self.commits_by_year.get(year, []))

    @property
    def commit_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/commits")]


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, github_api_base_url="https://api.github.test")


def run_cli(
    github: FakeGitHub,
    settings: Settings,
    repo: str | None = "octocat/Hello-World",
    contributor: str | None = "octocat",
    answers: tuple[str, ...] = (),
) -> tuple[int, str, str]:
    pending = list(answers)

    def reader(message: str) -> str:
        if not pending:
            raise EOFError
        return pending.pop(0)

    out = io.StringIO()
    err = io.StringIO()
    status = asyncio.run(
        run(
            repo,
            contributor,
            settings,
            reader=reader,
            out=out,
            err=err,
            color=False,
            now=NOW,
            transport=httpx.MockTransport(github),
        )
    )
    return status, out.getvalue(), err.getvalue()


def test_run_lists_contributors_and_prints_heatmap(settings: Settings) -> None:
    github = FakeGitHub(
        commits_by_year={
            "2021": [
                commit_record("2021-01-04T10:00:00Z"),
                commit_record("2021-01-04T11:00:00Z"),
            ]
        }
    )

    status, out, err = run_cli(github, settings)

    assert status == 0
    assert err == ""
    assert "Querying GitHub repository: octocat/Hello-World" in out
    assert "octocat: 3 commits\nhubot: 1 commits\n" in out
    assert "Contribution heatmap for octocat:" in out
    assert "Contributions for 2021:" in out
    assert "Contributions for 2020:" not in out
    assert "Contribution Legend:" in out


def test_explicit_repo_skips_git_remote(monkeypatch, settings: Settings) -> None:
    def fail_remote():
        raise AssertionError("git remote must not be read")

    monkeypatch.setattr("cchecker.services.repo_resolver.get_git_remote", fail_remote)
    github = FakeGitHub()

    status, _, _ = run_cli(github, settings, contributor=None)

    assert status == 0
    assert github.requests[0].url.path == "/repos/octocat/Hello-World/contributors"


def test_missing_repo_is_resolved_from_git_remote(monkeypatch, settings: Settings) -> None:
    monkeypatch.setattr(
        "cchecker.services.repo_resolver.get_git_remote",
        lambda: "git@github.com:rust-lang/rust.git",
    )
    github = FakeGitHub()

    status, out, _ = run_cli(github, settings, repo=None, contributor=None)

    assert status == 0
    assert "Querying GitHub repository: rust-lang/rust" in out
    assert github.requests[0].url.path == "/repos/rust-lang/rust/contributors"


def test_missing_repo_without_remote_fails_before_any_request(
    monkeypatch, settings: Settings
) -> None:
    monkeypatch.setattr("cchecker.services.repo_resolver.get_git_remote", lambda: None)
    github = FakeGitHub()

    status, out, err = run_cli(github, settings, repo=None)

    assert status == 1
    assert out == ""
    assert "git remote" in err
    assert github.requests == []


def test_contributors_failure_stops_run(settings: Settings) -> None:
    github = FakeGitHub(contributors_status=500)

    status, out, err = run_cli(github, settings)

    assert status == 1
    assert "status code 500" in err
    assert "Contributors:" not in out
    assert github.commit_requests == []


def test_not_found_year_does_not_stop_heatmap(settings: Settings) -> None:
    github = FakeGitHub(
        commits_by_year={"2018": [commit_record("2018-06-01T00:00:00Z")]},
        status_by_year={"2019": 404},
    )

    status, out, _ = run_cli(github, settings)

    assert status == 0
    assert "Contributions for 2018:" in out
    assert len(github.commit_requests) == 2022 - 2000 + 1


def test_server_error_during_activity_prints_no_heatmap(settings: Settings) -> None:
    github = FakeGitHub(
        commits_by_year={"2022": [commit_record("2022-01-03T00:00:00Z")]},
        status_by_year={"2021": 500},
    )

    status, out, err = run_cli(github, settings)

    assert status == 1
    assert "Failed to fetch contributor activity" in err
    assert "2021" in err
    assert "500" in err
    assert "Contribution Legend:" not in out
    assert len(github.commit_requests) == 2


def test_prompt_selects_contributor(settings: Settings) -> None:
    github = FakeGitHub(commits_by_year={"2020": [commit_record("2020-12-28T00:00:00Z")]})

    status, out, _ = run_cli(github, settings, contributor=None, answers=("y", "hubot"))

    assert status == 0
    assert "Contribution heatmap for hubot:" in out
    assert github.commit_requests[0].url.params["author"] == "hubot"


def test_declined_prompt_skips_activity(settings: Settings) -> None:
    github = FakeGitHub()

    status, out, _ = run_cli(github, settings, contributor=None, answers=("n",))

    assert status == 0
    assert github.commit_requests == []
    assert "Contribution heatmap" not in out


def test_contributor_without_commits_reports_nothing_found(settings: Settings) -> None:
    status, out, _ = run_cli(FakeGitHub(), settings)

    assert status == 0
    assert "No contributions found for octocat" in out
    assert "Contribution Legend:" not in out


def test_configured_label_is_printed(settings: Settings) -> None:
    settings.report_label = "Current User's Login: eR3R3"
    github = FakeGitHub(commits_by_year={"2022": [commit_record("2022-02-01T00:00:00Z")]})

    _, out, _ = run_cli(github, settings)

    assert "Current User's Login: eR3R3\n" in out


def test_parser_accepts_optional_positionals() -> None:
    parser = build_parser()

    assert vars(parser.parse_args([])) == {
        "repo": None,
        "contributor": None,
        "no_color": False,
        "verbose": False,
    }
    args = parser.parse_args(["octocat/Hello-World", "octocat", "--no-color"])
    assert (args.repo, args.contributor, args.no_color) == (
        "octocat/Hello-World",
        "octocat",
        True,
    )


def test_main_runs_cli_with_parsed_arguments(monkeypatch) -> None:
    received: dict[str, object] = {}

    async def fake_run(repo, contributor, settings, color=True, **kwargs):
        received.update(repo=repo, contributor=contributor, color=color)
        return 0

    monkeypatch.setattr("cchecker.main.run", fake_run)
    monkeypatch.setattr("cchecker.main.init_sentry", lambda settings: None)
    monkeypatch.setattr("cchecker.main.configure_logging", lambda level: None)

    assert main(["octocat/Hello-World", "--no-color"]) == 0
    assert received == {"repo": "octocat/Hello-World", "contributor": None, "color": False}


def test_settings_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_API_BASE_URL", "https://ghe.example.com/api/v3")
    monkeypatch.setenv("FIRST_YEAR", "2015")
    monkeypatch.setenv("REPORT_LABEL", "nightly")

    settings = Settings(_env_file=None)

    assert settings.github_api_base_url == "https://ghe.example.com/api/v3"
    assert settings.first_year == 2015
    assert settings.report_label == "nightly"
