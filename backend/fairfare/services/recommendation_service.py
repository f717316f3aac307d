"""
Trip recommendations and packing lists from the language model.

The model is asked for raw JSON but may still wrap it in prose or markdown,
so the first balanced JSON object is cut out of the reply before parsing.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional
from fairfare.core.config import settings
from fairfare.core.utils import extract_json_object
from fairfare.services.llm_client import LLMError

logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "AI returned invalid JSON format."
QUOTA_MESSAGE = "AI quota exceeded. Please wait a minute and try again."


class RecommendationError(ValueError):
    """User-facing failure of a generation request."""


def build_trip_prompt(destination: str, duration: int, purpose: Optional[str],
                      budget: Decimal, currency_symbol: str) -> str:
    return f"""
Plan a budget trip details for a user in {destination} for {duration} days.
Purpose: {purpose or "Leisure"}.
Total Budget: {currency_symbol}{budget}.

Return a JSON object with exactly these fields:
{{
    "food": [{{"name": "Name", "cost": "approx cost", "desc": "short desc"}}],
    "places": [{{"name": "Name", "ticket": "ticket price", "desc": "short desc"}}],
    "stays": [{{"name": "Name", "price": "price per night", "desc": "short desc"}}],
    "travel_tips": ["tip1", "tip2"]
}}
Do not include markdown or backticks. Just raw JSON.
"""


def build_packing_prompt(destination: str) -> str:
    return (
        f"Generate a smart packing list for a trip to {destination}. "
        'Return the response STRICTLY as a valid JSON object with this structure: '
        '{ "categories": [ { "name": "Category Name", "items": ["item1", "item2"] } ] }. '
        "Do NOT include markdown formatting like ```json. Only return the raw JSON string."
    )


class RecommendationGenerator:
    """Structured generation on top of a text generator."""

    def __init__(self, llm, currency_symbol: str = None):
        self._llm = llm
        self.currency_symbol = currency_symbol or settings.CURRENCY_SYMBOL

    async def _generate_json(self, prompt: str) -> Dict[str, Any]:
        try:
            text = await self._llm.generate(prompt)
        except LLMError as e:
            if e.status_code == 429:
                raise RecommendationError(QUOTA_MESSAGE)
            raise RecommendationError(f"Failed to generate plan: {e}")

        try:
            return extract_json_object(text)
        except ValueError as e:
            logger.warning(f"Unparseable model reply ({e}): {text[:200]!r}")
            raise RecommendationError(INVALID_JSON_MESSAGE)

    async def generate_trip_plan(self, destination: str, duration: int,
                                 purpose: Optional[str], budget: Decimal) -> Dict[str, Any]:
        """
        Recommendations bundle for a new trip.

        Returns:
            Dict with food, places, stays and travel_tips (content is not validated)

        Raises:
            RecommendationError: Provider failure or unusable reply
        """
        prompt = build_trip_prompt(destination, duration, purpose, budget, self.currency_symbol)
        return await self._generate_json(prompt)

    async def generate_packing_list(self, destination: str) -> Dict[str, Any]:
        """Packing list as {"categories": [{"name", "items"}]}."""
        data = await self._generate_json(build_packing_prompt(destination))
        if not isinstance(data.get("categories"), list):
            raise RecommendationError(INVALID_JSON_MESSAGE)
        return data
