from collections.abc import Iterable
from collections.abc import Mapping
from datetime import UTC
from datetime import datetime
from enum import Enum
from typing import TextIO

from cchecker.schemas.activity import WEEKDAYS
from cchecker.schemas.activity import Contributor
from cchecker.schemas.activity import YearMatrix


BLOCK = "■ "
ROW_INDENT = "    "


class Bucket(str, Enum):
    NONE = "none"
    ONE = "one"
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    MAX = "max"


# Ordered (inclusive upper bound, bucket) pairs; counts above the last bound are MAX.
BUCKETS: tuple[tuple[int, Bucket], ...] = (
    (0, Bucket.NONE),
    (1, Bucket.ONE),
    (3, Bucket.LOW),
    (6, Bucket.MID),
    (9, Bucket.HIGH),
)

PALETTE: dict[Bucket, tuple[int, int, int]] = {
    Bucket.NONE: (250, 250, 210),
    Bucket.ONE: (152, 251, 152),
    Bucket.LOW: (127, 255, 0),
    Bucket.MID: (0, 255, 0),
    Bucket.HIGH: (50, 205, 50),
    Bucket.MAX: (34, 139, 34),
}

LEGEND: tuple[tuple[Bucket, str], ...] = (
    (Bucket.NONE, "No contributions"),
    (Bucket.ONE, "1 contribution"),
    (Bucket.LOW, "2-3 contributions"),
    (Bucket.MID, "4-6 contributions"),
    (Bucket.HIGH, "7-9 contributions"),
    (Bucket.MAX, "10+ contributions"),
)


def bucket_for(count: int) -> Bucket:
    """Map a daily commit count to its color bucket."""

    for upper_bound, bucket in BUCKETS:
        if count <= upper_bound:
            return bucket
    return Bucket.MAX


def paint(token: str, bucket: Bucket, color: bool = True) -> str:
    """Wrap `token` in the ANSI truecolor escape for `bucket`."""

    if not color:
        return token
    r, g, b = PALETTE[bucket]
    return f"\033[38;2;{r};{g};{b}m{token}\033[0m"


def render_contributors(contributors: Iterable[Contributor], out: TextIO) -> None:
    print("Contributors:", file=out)
    for contributor in contributors:
        print(f"{contributor.login}: {contributor.contributions} commits", file=out)


def render_year(matrix: YearMatrix, out: TextIO, color: bool = True) -> None:
    print(f"\nContributions for {matrix.year}:", file=out)
    for weekday in range(WEEKDAYS):
        row = matrix.cells[weekday][: matrix.max_week + 1]
        blocks = "".join(paint(BLOCK, bucket_for(count), color) for count in row)
        print(f"{ROW_INDENT}{blocks}", file=out)


def render_legend(out: TextIO, color: bool = True) -> None:
    entries = [f"{paint(BLOCK, bucket, color)} {label}" for bucket, label in LEGEND]
    print("\nContribution Legend:", file=out)
    print("    ".join(entries), file=out)


def render_heatmap(
    username: str,
    matrices: Mapping[int, YearMatrix],
    out: TextIO,
    now: datetime | None = None,
    label: str | None = None,
    color: bool = True,
) -> None:
    """Print the report header, one grid per year in mapping order, and the legend."""

    now = now or datetime.now(UTC)
    print(f"\nContribution heatmap for {username}:", file=out)
    print(f"Current Date and Time (UTC): {now:%Y-%m-%d %H:%M:%S}", file=out)
    if label:
        print(label, file=out)

    for matrix in matrices.values():
        render_year(matrix, out, color=color)

    render_legend(out, color=color)
