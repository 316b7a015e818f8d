"""Prefill agent: suggests name, description and price from an item's photos."""

from typing import Sequence

from pydantic_ai import ImageUrl

from catalog.agents.base import create_agent
from catalog.models.suggestions import ItemSuggestion
from catalog.utils.logger import get_logger

logger = get_logger("catalog.agents.prefill")

PREFILL_PROMPT = """You write listings for a small second-hand linens and home goods shop.
Look at the photos of one item and propose:
- name: a short, specific listing title (max 80 characters, no emoji);
- description: 2-4 plain sentences on material, colour, size cues and condition visible in the photos;
- unit_price_cents: a fair resale price in US cents as an integer.
Do not invent brands, measurements or defects you cannot see. If the current name or
description is given, keep any facts it states and improve the wording."""


class PrefillAgentSuggester:
    """ItemSuggester backed by a Pydantic AI agent with structured ItemSuggestion output."""

    def __init__(self, model: str = "openai:gpt-4o-mini"):
        self._agent = create_agent(model, PREFILL_PROMPT, ItemSuggestion)

    async def suggest(
        self,
        image_urls: Sequence[str],
        name: str | None,
        description: str | None,
    ) -> ItemSuggestion:
        parts = [f"Current name: {name or '(none)'}\nCurrent description: {description or '(none)'}"]
        parts.extend(ImageUrl(url=url) for url in image_urls)
        logger.info("prefill.agent.start", images=len(image_urls))
        result = await self._agent.run(parts)
        out = result.output
        logger.info("prefill.agent.ok", name=out.name, unit_price_cents=out.unit_price_cents)
        return out
