"""AI collaborators: listing suggestion agent and text embedder."""

from catalog.agents.base import Embedder, ItemSuggester
from catalog.agents.embedder import OpenAIEmbedder
from catalog.agents.prefill_agent import PrefillAgentSuggester

__all__ = ["Embedder", "ItemSuggester", "OpenAIEmbedder", "PrefillAgentSuggester"]
