"""Pydantic models for the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field

from nutritrack.domain.models import DayLog, Macros, MealSlot, UserSettings
from nutritrack.domain.stats import AggregationResult, HistoryRow
from nutritrack.domain.sync import SyncState, SyncStatus


class MacrosModel(BaseModel):
    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @classmethod
    def from_domain(cls, macros: Macros) -> "MacrosModel":
        return cls(**macros.to_dict())


class MacrosIn(BaseModel):
    """Macros entered for one meal slot."""

    calories: float = Field(default=0.0, ge=0.0)
    protein: float = Field(default=0.0, ge=0.0)
    carbs: float = Field(default=0.0, ge=0.0)
    fat: float = Field(default=0.0, ge=0.0)

    def to_domain(self) -> Macros:
        return Macros(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fat=self.fat,
        )


class DayLogIn(BaseModel):
    """Payload for saving a day log; missing slots count as zero."""

    meals: dict[MealSlot, MacrosIn] = Field(default_factory=dict)
    exercise_calories: float = Field(default=0.0, ge=0.0)

    def to_domain(self, day: str) -> DayLog:
        return DayLog(
            date=day,
            meals={slot: macros.to_domain() for slot, macros in self.meals.items()},
            exercise_calories=self.exercise_calories,
        )


class DayLogOut(BaseModel):
    date: str
    meals: dict[MealSlot, MacrosModel]
    exercise_calories: float
    totals: MacrosModel

    @classmethod
    def from_domain(cls, log: DayLog, totals: Macros) -> "DayLogOut":
        return cls(
            date=log.date,
            meals={
                slot: MacrosModel.from_domain(log.meals[slot]) for slot in MealSlot
            },
            exercise_calories=log.exercise_calories,
            totals=MacrosModel.from_domain(totals),
        )


class SettingsModel(BaseModel):
    tmb: float
    name: str

    @classmethod
    def from_domain(cls, settings: UserSettings) -> "SettingsModel":
        return cls(tmb=settings.tmb, name=settings.name)


class SettingsIn(BaseModel):
    """User settings as submitted; tmb bounds match the settings form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    tmb: float = Field(ge=500, le=5000)
    name: str = Field(min_length=1)

    def to_domain(self) -> UserSettings:
        return UserSettings(tmb=self.tmb, name=self.name)


class IdentityModel(BaseModel):
    user_id: str = Field(min_length=1)


class SyncStateModel(BaseModel):
    status: SyncStatus
    online: bool
    user_id: str

    @classmethod
    def from_domain(cls, state: SyncState, user_id: str) -> "SyncStateModel":
        return cls(status=state.status, online=state.online, user_id=user_id)


class ChartPointModel(BaseModel):
    date: str
    intake: float
    expenditure: float
    protein: float
    carbs: float
    fat: float


class DashboardModel(BaseModel):
    """Aggregated statistics for a date range."""

    start_date: str
    end_date: str
    days_count: int
    logged_days: int
    totals: MacrosModel
    total_basal_burn: float
    total_exercise_burn: float
    total_burned: float
    calorie_balance: float
    basal_balance: float
    weight_change_kg: float
    chart: list[ChartPointModel]

    @classmethod
    def from_domain(
        cls, start_date: str, end_date: str, result: AggregationResult
    ) -> "DashboardModel":
        return cls(
            start_date=start_date,
            end_date=end_date,
            days_count=result.days_count,
            logged_days=len(result.filtered_logs),
            totals=MacrosModel.from_domain(result.totals),
            total_basal_burn=result.total_basal_burn,
            total_exercise_burn=result.total_exercise_burn,
            total_burned=result.total_burned,
            calorie_balance=result.calorie_balance,
            basal_balance=result.basal_balance,
            weight_change_kg=result.weight_change_kg,
            chart=[
                ChartPointModel(
                    date=point.date,
                    intake=point.intake,
                    expenditure=point.expenditure,
                    protein=point.protein,
                    carbs=point.carbs,
                    fat=point.fat,
                )
                for point in result.chart
            ],
        )


class HistoryRowModel(BaseModel):
    date: str
    calories: float
    exercise_calories: float

    @classmethod
    def from_domain(cls, row: HistoryRow) -> "HistoryRowModel":
        return cls(
            date=row.date,
            calories=row.calories,
            exercise_calories=row.exercise_calories,
        )


class InsightModel(BaseModel):
    text: str
