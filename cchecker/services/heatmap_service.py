from collections.abc import Iterable
from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import timedelta

from cchecker.schemas.activity import WEEK_COLUMNS
from cchecker.schemas.activity import CommitEvent
from cchecker.schemas.activity import YearMatrix


# Years other than the current one end a fixed 364 days after January 1st,
# so December 31st of a leap year is never walked.
YEAR_SPAN = timedelta(days=364)


def group_daily_counts(events: Iterable[CommitEvent]) -> dict[int, dict[str, int]]:
    """Count events per `YYYY-MM-DD` day, grouped by UTC calendar year."""

    counts_by_year: dict[int, dict[str, int]] = {}
    for event in events:
        day = event.committed_at.astimezone(UTC).date()
        year_counts = counts_by_year.setdefault(day.year, {})
        day_key = day.isoformat()
        year_counts[day_key] = year_counts.get(day_key, 0) + 1

    return counts_by_year


def year_range(year: int, now: datetime) -> tuple[date, date]:
    """Return the first and last day walked for `year`."""

    start = date(year, 1, 1)
    if year == now.year:
        return start, now.astimezone(UTC).date()
    return start, start + YEAR_SPAN


def week_column(day: date, year_start: date) -> int:
    """Return the Monday-first week index of `day` within its year.

    Week 0 is the ISO week containing January 1st, so the index equals the
    ISO week number minus one whenever January 1st falls on Monday through
    Thursday.
    """

    first_monday = year_start - timedelta(days=year_start.weekday())
    return (day - first_monday).days // 7


def build_year_matrix(year: int, daily_counts: dict[str, int], now: datetime) -> YearMatrix:
    matrix = YearMatrix(year=year)
    start, end = year_range(year, now)

    current_day = start
    while current_day <= end:
        week = week_column(current_day, start)
        if week < WEEK_COLUMNS:
            matrix.cells[current_day.weekday()][week] = daily_counts.get(
                current_day.isoformat(), 0
            )
            matrix.max_week = max(matrix.max_week, week)
        current_day += timedelta(days=1)

    return matrix


def build_year_matrices(
    events: Iterable[CommitEvent], now: datetime | None = None
) -> dict[int, YearMatrix]:
    """Lay commit events out into one weekday x week matrix per year.

    Years without events are left out; the result iterates newest year first.
    """

    now = now or datetime.now(UTC)
    counts_by_year = group_daily_counts(events)
    return {
        year: build_year_matrix(year, counts_by_year[year], now)
        for year in sorted(counts_by_year, reverse=True)
    }


def matrix_total(matrix: YearMatrix) -> int:
    return sum(sum(row) for row in matrix.cells)
