"""OpenAI text embedder for description embeddings."""

from openai import AsyncOpenAI, OpenAIError

from catalog.errors import ConfigurationError
from catalog.utils.logger import get_logger

logger = get_logger("catalog.agents.embedder")


class OpenAIEmbedder:
    def __init__(self, api_key: str | None, model: str = "text-embedding-3-small"):
        if not api_key:
            raise ConfigurationError("Server misconfigured: missing OPENAI_API_KEY.")
        self.model = model
        self._client = AsyncOpenAI(api_key=api_key)

    async def embed(self, text: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(model=self.model, input=text)
        except OpenAIError as e:
            logger.error("embedder.request_failed", model=self.model, error=str(e))
            raise
        vector = list(response.data[0].embedding)
        logger.debug("embedder.ok", model=self.model, dimensions=len(vector))
        return vector
