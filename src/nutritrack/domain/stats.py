"""Domain models for dashboard statistics."""

from dataclasses import dataclass

from nutritrack.domain.models import DayLog, Macros


@dataclass(frozen=True)
class ChartPoint:
    """Intake versus expenditure for a single logged day."""

    date: str
    intake: float
    expenditure: float
    protein: float
    carbs: float
    fat: float


@dataclass(frozen=True)
class AggregationResult:
    """Totals, balances and chart series for a date range."""

    filtered_logs: list[DayLog]
    totals: Macros
    total_basal_burn: float
    total_exercise_burn: float
    total_burned: float
    calorie_balance: float
    basal_balance: float
    weight_change_kg: float
    days_count: int
    chart: list[ChartPoint]


@dataclass(frozen=True)
class HistoryRow:
    """Per-day calorie summary for the history list."""

    date: str
    calories: float
    exercise_calories: float
