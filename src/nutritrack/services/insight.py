"""Natural-language insight generation using LLMs."""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from nutritrack.domain.models import DayLog, Macros, UserSettings
from nutritrack.services.aggregation import KCAL_PER_KG, daily_averages

logger = logging.getLogger(__name__)

INSIGHT_NOT_CONFIGURED = (
    "AI insights are not configured. Set OPENAI_API_KEY to enable them."
)
INSIGHT_FAILED = "Couldn't reach the AI service. Check your API key and try again."
INSIGHT_EMPTY = "No analysis could be generated right now."


class InsightClient(Protocol):
    """Interface for LLM text generation."""

    async def complete(
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
    ) -> str:
        """Return generated text for a prompt."""


@dataclass
class InsightService:
    """Builds the analysis prompt and turns failures into readable text."""

    client: InsightClient | None
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate_insight(
        self,
        filtered_logs: Sequence[DayLog],
        settings: UserSettings,
        totals: Macros,
        weight_change_kg: float,
    ) -> str:
        """Return a short narrative about the period, never raising."""
        if self.client is None:
            return INSIGHT_NOT_CONFIGURED
        payload = build_analysis_payload(
            filtered_logs, settings, totals, weight_change_kg
        )
        try:
            text = await self.client.complete(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=build_prompt(payload),
            )
        except Exception:
            logger.exception("Insight generation failed")
            return INSIGHT_FAILED
        return text.strip() or INSIGHT_EMPTY


def build_analysis_payload(
    filtered_logs: Sequence[DayLog],
    settings: UserSettings,
    totals: Macros,
    weight_change_kg: float,
) -> dict[str, object]:
    """Summarize the period as the data the model is asked to analyze."""
    averages = daily_averages(totals, len(filtered_logs))
    return {
        "period_days": len(filtered_logs),
        "tmb": settings.tmb,
        "total_intake": totals.to_dict(),
        "projected_weight_change_kg": round(weight_change_kg, 3),
        "daily_average": {
            "calories": round(averages.calories),
            "protein": round(averages.protein),
            "carbs": round(averages.carbs),
            "fat": round(averages.fat),
        },
    }


def build_prompt(payload: dict[str, object]) -> str:
    return (
        "Act as a senior sports nutritionist. Analyze the following user data:\n"
        f"{json.dumps(payload, indent=2)}\n\n"
        f"The weight change was projected with the rule {KCAL_PER_KG} kcal = 1 kg.\n\n"
        "Write a short, motivational summary (at most 3 paragraphs):\n"
        "1. Assess the quality of the macro distribution.\n"
        "2. Comment on the calorie deficit or surplus.\n"
        "3. Give one practical tip to improve results.\n"
        "Use simple Markdown formatting."
    )
