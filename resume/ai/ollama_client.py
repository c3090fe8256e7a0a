# resume/ai/ollama_client.py
import logging
from typing import Any, Dict, Optional

import httpx

from resume.ai.base import UpstreamCallError

logger = logging.getLogger(__name__)


class OllamaRewriteClient:
    """
    Rewrite service backed by a self-hosted Ollama server
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1",
        timeout: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 1600,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize Ollama client

        Args:
            base_url: Ollama API endpoint
            model: Model to use (llama3.1, mistral, etc.)
            timeout: Request timeout in seconds
            temperature: Sampling temperature
            max_tokens: Max response length
            transport: Custom httpx transport (tests)
        """
        self.base_url = base_url.rstrip('/')
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or self.timeout,
            transport=self._transport
        )

    async def is_available(self) -> bool:
        """Check if Ollama is running"""
        try:
            async with self._client(timeout=5.0) as client:
                response = await client.get("/api/tags")
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Ollama not available: {e}")
            return False

    async def generate_structured(
        self,
        system_prompt: str,
        prompt: str,
        schema: Dict[str, Any]
    ) -> Optional[str]:
        """
        Ask the model for a JSON answer constrained by `schema`

        Returns:
            Raw message content (may be empty)

        Raises:
            UpstreamCallError: On transport errors or non-2xx responses
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "stream": False,
            "format": schema,
            "options": {
                "temperature": self.temperature,
                "num_predict": self.max_tokens,
            },
        }

        try:
            async with self._client() as client:
                response = await client.post("/api/chat", json=payload)
                response.raise_for_status()
                result = response.json()
        except httpx.TimeoutException as e:
            raise UpstreamCallError(f"Ollama request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise UpstreamCallError(f"Ollama request failed: {e}") from e
        except ValueError as e:
            raise UpstreamCallError(f"Ollama returned a non-JSON envelope: {e}") from e

        return (result.get("message") or {}).get("content", "")
