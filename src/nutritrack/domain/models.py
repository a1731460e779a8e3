"""Domain models for day logs and user settings."""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum


class MealSlot(str, Enum):
    """Meal categories a day log is split into."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class Macros:
    """Calories (kcal) and macronutrients (grams)."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0

    @classmethod
    def zero(cls) -> "Macros":
        """Return an empty macro value."""
        return cls()

    @classmethod
    def from_dict(cls, raw: object) -> "Macros":
        """Build macros from a stored mapping, treating bad fields as zero."""
        if not isinstance(raw, dict):
            return cls.zero()
        return cls(
            calories=coerce_number(raw.get("calories")),
            protein=coerce_number(raw.get("protein")),
            carbs=coerce_number(raw.get("carbs")),
            fat=coerce_number(raw.get("fat")),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fat": self.fat,
        }

    def __add__(self, other: "Macros") -> "Macros":
        return Macros(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
        )


def _empty_meals() -> dict[MealSlot, Macros]:
    return {slot: Macros.zero() for slot in MealSlot}


@dataclass(frozen=True)
class DayLog:
    """Everything eaten and burned on one calendar date."""

    date: str
    meals: dict[MealSlot, Macros] = field(default_factory=_empty_meals)
    exercise_calories: float = 0.0

    def __post_init__(self) -> None:
        missing = [slot for slot in MealSlot if slot not in self.meals]
        if missing:
            meals = dict(self.meals)
            for slot in missing:
                meals[slot] = Macros.zero()
            object.__setattr__(self, "meals", meals)

    @classmethod
    def empty(cls, day: str) -> "DayLog":
        """Return a log with zeroed meals and no exercise."""
        return cls(date=day)

    @classmethod
    def from_dict(cls, raw: dict[str, object]) -> "DayLog":
        """Parse a stored day log, filling gaps with zeros."""
        raw_meals = raw.get("meals")
        meals = _empty_meals()
        if isinstance(raw_meals, dict):
            for key, value in raw_meals.items():
                slot = _parse_slot(key)
                if slot is not None:
                    meals[slot] = Macros.from_dict(value)
        exercise = raw.get("exercise_calories", raw.get("exerciseCalories"))
        day = raw.get("date")
        return cls(
            date=day if isinstance(day, str) else "",
            meals=meals,
            exercise_calories=coerce_number(exercise),
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "date": self.date,
            "meals": {slot.value: self.meals[slot].to_dict() for slot in MealSlot},
            "exercise_calories": self.exercise_calories,
        }


@dataclass(frozen=True)
class UserSettings:
    """Per-user settings: basal metabolic rate and display name."""

    tmb: float
    name: str

    @classmethod
    def from_dict(
        cls, raw: dict[str, object], defaults: "UserSettings"
    ) -> "UserSettings":
        """Parse stored settings, falling back to defaults for bad fields."""
        tmb = coerce_number(raw.get("tmb"))
        name = raw.get("name")
        return cls(
            tmb=tmb if tmb > 0 else defaults.tmb,
            name=name if isinstance(name, str) and name else defaults.name,
        )

    def to_dict(self) -> dict[str, object]:
        return {"tmb": self.tmb, "name": self.name}


class InvalidDateRangeError(ValueError):
    """Raised when a requested range is malformed or ends before it starts."""


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of ISO dates."""

    start_date: str
    end_date: str

    @property
    def is_inverted(self) -> bool:
        return self.start_date > self.end_date

    @classmethod
    def validated(cls, start_date: str, end_date: str) -> "DateRange":
        """Build a range from user input, rejecting bad dates and inverted bounds."""
        for value in (start_date, end_date):
            try:
                parse_iso_date(value)
            except ValueError as exc:
                raise InvalidDateRangeError(str(exc)) from exc
        date_range = cls(start_date=start_date, end_date=end_date)
        if date_range.is_inverted:
            raise InvalidDateRangeError(
                f"start_date {start_date} is after end_date {end_date}"
            )
        return date_range

    @classmethod
    def last_days(cls, today: date, days: int) -> "DateRange":
        """Return the range from `days` days before today up to today."""
        start = today - timedelta(days=days)
        return cls(start_date=start.isoformat(), end_date=today.isoformat())


def coerce_number(value: object) -> float:
    """Return a finite float for numeric input and 0.0 for anything else."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def parse_iso_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD date string."""
    parsed = date.fromisoformat(value)
    if parsed.isoformat() != value:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return parsed


def _parse_slot(key: object) -> MealSlot | None:
    if isinstance(key, MealSlot):
        return key
    if not isinstance(key, str):
        return None
    try:
        return MealSlot(key.lower())
    except ValueError:
        return None
