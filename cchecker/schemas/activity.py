from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


WEEKDAYS = 7
WEEK_COLUMNS = 53


class Contributor(BaseModel):
    """Repository contributor with the number of credited commits."""

    login: str
    contributions: int = Field(default=0, ge=0)


class CommitEvent(BaseModel):
    """Single authored commit timestamp, normalized to UTC."""

    model_config = ConfigDict(frozen=True)

    author: str
    committed_at: datetime


def empty_cells() -> list[list[int]]:
    return [[0] * WEEK_COLUMNS for _ in range(WEEKDAYS)]


class YearMatrix(BaseModel):
    """Weekday x week grid of commit counts for one calendar year.

    Rows are Monday-first weekdays, columns are week indexes counted from the
    week containing January 1st.
    """

    year: int
    cells: list[list[int]] = Field(default_factory=empty_cells)
    max_week: int = 0
