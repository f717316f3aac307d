"""
Fair-price guardrail for new expenses.

Asks the model whether a price is fair, expensive or cheap for a budget
traveler. Only a reply mentioning "expensive" raises a warning; any other
reply, and any failure to get one, lets the expense through.
"""
import logging
from typing import Any
from fairfare.schemas.expense import FairnessVerdict

logger = logging.getLogger(__name__)


def build_prompt(item: str, cost: Any, location: str) -> str:
    return (
        f"I am a tourist in {location}. I am paying {cost} for {item}. "
        "Is this fair, expensive, or cheap for a budget traveler? "
        "Answer in one short sentence starting with 'Fair', 'Expensive', or 'Cheap'."
    )


def classify_reply(text: str) -> FairnessVerdict:
    """Warn when the reply says the price is expensive."""
    if text and "expensive" in text.lower():
        return FairnessVerdict(warning=True, message=text.strip())
    return FairnessVerdict(warning=False, message=text.strip() if text else None)


class FairnessChecker:
    """Fail-open price check backed by a text generator."""

    def __init__(self, llm):
        self._llm = llm

    async def check(self, item: str, cost: Any, location: str) -> FairnessVerdict:
        """Judge a price; errors count as fair."""
        try:
            text = await self._llm.generate(build_prompt(item, cost, location))
        except Exception as e:
            logger.error(f"Fair-price check failed, allowing expense: {e}")
            return FairnessVerdict(warning=False)
        logger.info(f"Fair-price check for '{item}' in {location}: {text.strip()}")
        return classify_reply(text)
