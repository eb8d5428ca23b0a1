"""Derived statistics models."""

from pydantic import BaseModel, Field


class WeekTotals(BaseModel):
    """Totals for a single week block."""

    total_earning: float = Field(default=0.0, description="Sum of all trade cells")
    total_charges: float = Field(default=0.0, description="Sum of all charges")
    net_profit: float = Field(default=0.0, description="Earning minus charges")

    model_config = {"frozen": True}


class OverallTotals(BaseModel):
    """Totals across every week of a journal."""

    completed_days: int = Field(default=0, ge=0, description="Days with any non-zero entry")
    total_capital: float = Field(default=0.0, description="Starting capital plus net profit")
    per_day_revenue: float = Field(default=0.0, description="Net profit per completed day")
    total_earning: float = Field(default=0.0, description="Sum of all trade cells")
    roi: float = Field(default=0.0, description="Return on starting capital, percent")
    total_trades: int = Field(default=0, ge=0, description="Count of non-zero trade cells")
    win_days: int = Field(default=0, ge=0, description="Days with positive P&L")
    loss_days: int = Field(default=0, ge=0, description="Days with negative P&L")
    total_charges: float = Field(default=0.0, description="Sum of all charges")

    model_config = {"frozen": True}

    @property
    def net_profit(self) -> float:
        return self.total_earning - self.total_charges
