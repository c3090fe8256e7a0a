# resume/ai/openai_client.py
import logging
from typing import Any, Dict, Optional

from openai import APIError, AsyncOpenAI

from resume.ai.base import UpstreamCallError
from resume.ai.prompts import RESPONSE_SCHEMA_NAME

logger = logging.getLogger(__name__)


class OpenAIRewriteClient:
    """
    Rewrite service backed by the OpenAI chat completions API

    Retries are owned by the orchestrator, so the SDK's own retry loop
    is switched off.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 1600,
        client: Optional[AsyncOpenAI] = None
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def generate_structured(
        self,
        system_prompt: str,
        prompt: str,
        schema: Dict[str, Any]
    ) -> Optional[str]:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": RESPONSE_SCHEMA_NAME,
                        "strict": True,
                        "schema": schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
            )
        except APIError as e:
            raise UpstreamCallError(f"OpenAI request failed: {e}") from e

        if response.usage:
            logger.info(
                f"OpenAI usage: prompt={response.usage.prompt_tokens} "
                f"completion={response.usage.completion_tokens} "
                f"total={response.usage.total_tokens}"
            )

        if not response.choices:
            return None
        return response.choices[0].message.content
