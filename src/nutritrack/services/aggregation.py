"""Aggregation of day logs into dashboard statistics.

Every function here is pure: inputs are never mutated and malformed numeric
fields count as zero instead of raising.
"""

import math
from collections.abc import Iterable, Sequence

from nutritrack.domain.models import (
    DateRange,
    DayLog,
    Macros,
    MealSlot,
    UserSettings,
    coerce_number,
    parse_iso_date,
)
from nutritrack.domain.stats import AggregationResult, ChartPoint, HistoryRow

# Conventional approximation: 7000 kcal of surplus or deficit ~ 1 kg of body mass.
KCAL_PER_KG = 7000


def filter_by_range(logs: Iterable[DayLog], date_range: DateRange) -> list[DayLog]:
    """Return logs whose date falls inside the inclusive range."""
    return [
        log
        for log in logs
        if date_range.start_date <= log.date <= date_range.end_date
    ]


def compute_day_count(date_range: DateRange) -> int:
    """Return the number of calendar days in the range, never less than 1."""
    try:
        start = parse_iso_date(date_range.start_date)
        end = parse_iso_date(date_range.end_date)
    except ValueError:
        return 1
    return max(1, (end - start).days + 1)


def sum_macros(log: DayLog) -> Macros:
    """Sum the macros of every meal slot in a log."""
    meals = log.meals if isinstance(log.meals, dict) else {}
    total = Macros.zero()
    for slot in MealSlot:
        meal = meals.get(slot)
        if meal is None:
            continue
        total = total + Macros(
            calories=coerce_number(getattr(meal, "calories", 0)),
            protein=coerce_number(getattr(meal, "protein", 0)),
            carbs=coerce_number(getattr(meal, "carbs", 0)),
            fat=coerce_number(getattr(meal, "fat", 0)),
        )
    return total


def aggregate(
    logs: Sequence[DayLog], settings: UserSettings, date_range: DateRange
) -> AggregationResult:
    """Compute totals, balances, projected weight change and the chart series."""
    filtered = sorted(filter_by_range(logs, date_range), key=lambda log: log.date)
    tmb = coerce_number(settings.tmb)

    per_day = [sum_macros(log) for log in filtered]
    exercise = [coerce_number(log.exercise_calories) for log in filtered]
    # fsum keeps the totals exact regardless of input order.
    totals = Macros(
        calories=math.fsum(day.calories for day in per_day),
        protein=math.fsum(day.protein for day in per_day),
        carbs=math.fsum(day.carbs for day in per_day),
        fat=math.fsum(day.fat for day in per_day),
    )
    total_exercise_burn = math.fsum(exercise)
    chart = [
        ChartPoint(
            date=log.date,
            intake=day.calories,
            expenditure=tmb + burned,
            protein=day.protein,
            carbs=day.carbs,
            fat=day.fat,
        )
        for log, day, burned in zip(filtered, per_day, exercise, strict=True)
    ]

    days_count = compute_day_count(date_range)
    total_basal_burn = tmb * days_count
    total_burned = total_basal_burn + total_exercise_burn
    calorie_balance = totals.calories - total_burned
    basal_balance = totals.calories - total_basal_burn

    return AggregationResult(
        filtered_logs=filtered,
        totals=totals,
        total_basal_burn=total_basal_burn,
        total_exercise_burn=total_exercise_burn,
        total_burned=total_burned,
        calorie_balance=calorie_balance,
        basal_balance=basal_balance,
        weight_change_kg=calorie_balance / KCAL_PER_KG,
        days_count=days_count,
        chart=chart,
    )


def daily_averages(totals: Macros, log_count: int) -> Macros:
    """Average the totals over the number of logged days."""
    divisor = max(1, log_count)
    return Macros(
        calories=totals.calories / divisor,
        protein=totals.protein / divisor,
        carbs=totals.carbs / divisor,
        fat=totals.fat / divisor,
    )


def history(logs: Iterable[DayLog], date_range: DateRange) -> list[HistoryRow]:
    """Return per-day calorie rows for the range, newest first."""
    rows = [
        HistoryRow(
            date=log.date,
            calories=sum_macros(log).calories,
            exercise_calories=coerce_number(log.exercise_calories),
        )
        for log in filter_by_range(logs, date_range)
    ]
    return sorted(rows, key=lambda row: row.date, reverse=True)
