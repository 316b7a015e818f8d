"""Collaborator contracts and shared Pydantic AI agent construction."""

from typing import Protocol, Sequence

from pydantic_ai import Agent

from catalog.models.suggestions import ItemSuggestion


def create_agent(model: str, system_prompt: str, output_type: type, **kwargs) -> Agent:
    """Create a Pydantic AI agent with shared settings. The provider reads OPENAI_API_KEY."""
    return Agent(
        model,
        output_type=output_type,
        system_prompt=system_prompt,
        retries=1,
        **kwargs,
    )


class ItemSuggester(Protocol):
    """Proposes listing fields from the item's photos and any existing text."""

    async def suggest(
        self,
        image_urls: Sequence[str],
        name: str | None,
        description: str | None,
    ) -> ItemSuggestion:
        ...


class Embedder(Protocol):
    """Turns source text into a vector for one fixed model."""

    model: str

    async def embed(self, text: str) -> list[float]:
        ...
