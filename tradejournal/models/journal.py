"""Journal and WeekBlock data models."""

from datetime import date as date_type
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, Field, model_validator

# Fixed journal geometry: 30 days split into 6 weeks of 5 days, 5 trade slots per day.
JOURNAL_DAYS = 30
DAYS_PER_WEEK = 5
TRADES_PER_DAY = 5
WEEK_COUNT = JOURNAL_DAYS // DAYS_PER_WEEK
WEEK_KEYS = tuple(f"week{n}" for n in range(1, WEEK_COUNT + 1))


class WeekBlock(BaseModel):
    """One slice of up to five consecutive days of a journal."""

    dates: tuple[date_type, ...] = Field(
        ..., min_length=1, max_length=DAYS_PER_WEEK, description="Ordered calendar dates"
    )
    trades: tuple[tuple[float, ...], ...] = Field(
        ..., description="Trade results, one row per trade slot, one column per date"
    )
    charges: tuple[float, ...] = Field(..., description="Charges, one per date")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_shape(self) -> "WeekBlock":
        width = len(self.dates)
        if len(self.trades) != TRADES_PER_DAY:
            raise ValueError(
                f"trades must have {TRADES_PER_DAY} rows, got {len(self.trades)}"
            )
        for index, row in enumerate(self.trades):
            if len(row) != width:
                raise ValueError(
                    f"trade row {index} has {len(row)} columns, expected {width}"
                )
        if len(self.charges) != width:
            raise ValueError(
                f"charges has {len(self.charges)} entries, expected {width}"
            )
        return self

    @classmethod
    def empty(cls, dates) -> "WeekBlock":
        """Build a zero-filled block over the given dates."""
        dates = tuple(dates)
        width = len(dates)
        return cls(
            dates=dates,
            trades=tuple((0.0,) * width for _ in range(TRADES_PER_DAY)),
            charges=(0.0,) * width,
        )

    def column(self, day_index: int) -> tuple[float, ...]:
        """Trade values recorded for one date."""
        return tuple(row[day_index] for row in self.trades)


class Journal(BaseModel):
    """A 30-day trading journal owned by one user."""

    id: Optional[str] = Field(default=None, description="Store-assigned identifier")
    owner: str = Field(..., min_length=1, description="Owning user id")
    month: int = Field(..., ge=1, le=12, description="Month of the start date")
    year: int = Field(..., description="Year of the start date")
    start_date: date_type = Field(..., description="First day covered by the journal")
    starting_capital: float = Field(
        default=0.0, ge=0, allow_inf_nan=False, description="Capital before any trade"
    )
    weeks: dict[str, WeekBlock] = Field(
        default_factory=dict, description="Week blocks keyed week1..week6"
    )
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")

    model_config = {"frozen": True}

    @property
    def end_date(self) -> date_type:
        """Last day covered by the journal (inclusive)."""
        return self.start_date + timedelta(days=JOURNAL_DAYS - 1)

    def ordered_weeks(self) -> list[tuple[str, WeekBlock]]:
        """Week blocks in week1..week6 order, skipping missing keys."""
        return [(key, self.weeks[key]) for key in WEEK_KEYS if key in self.weeks]
