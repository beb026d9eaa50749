"""
app/services/llm_service.py

Purpose: Structured data extraction with OpenAI chat completions

- Turns a transcript into shop / product / name JSON
- Picks the prompt from the extraction context or the site type
- Always requests a JSON object response
"""

import json
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, APIError, APITimeoutError

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.core.logging import get_logger
from app.models.site import SiteType
from utils.prompts import (
    CONTEXT_PROMPTS,
    MENU_SITE_PROMPT,
    SHOP_EXTRACTION_PROMPT,
    SHOP_SITE_PROMPT,
)
from utils.time_utils import utcnow

logger = get_logger(__name__)


class LLMService:
    """
    Thin wrapper around the OpenAI client that always returns parsed JSON.
    """

    def __init__(self, client: Optional[AsyncOpenAI] = None):
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise ExternalServiceError("Language model service is not configured")
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.EXTERNAL_SERVICE_TIMEOUT
            )
        return self._client

    async def extract_json(self, system_prompt: str, user_content: str) -> Dict[str, Any]:
        """
        Runs one chat completion and parses the reply as a JSON object.

        Returns:
            Parsed dict ({} when the model returns nothing)

        Raises:
            ExternalServiceError: On API failure or a reply that is not JSON
        """
        try:
            completion = await self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                response_format={"type": "json_object"},
                temperature=settings.OPENAI_TEMPERATURE
            )
        except APITimeoutError:
            logger.error("OpenAI request timed out")
            raise ExternalServiceError("Language model service timed out")
        except APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise ExternalServiceError("Language model service error")

        content = completion.choices[0].message.content if completion.choices else None
        if not content:
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.error(f"LLM returned invalid JSON: {content[:200]}")
            raise ExternalServiceError("Failed to parse extracted data")

        if not isinstance(data, dict):
            raise ExternalServiceError("Failed to parse extracted data")
        return data

    async def extract_by_context(self, transcript: str, context: Optional[str] = None) -> Dict[str, Any]:
        """
        Extraction for one wizard step ("name", "details", "product"),
        or the full shop extraction for any other context.
        """
        prompt = CONTEXT_PROMPTS.get(context or "", SHOP_EXTRACTION_PROMPT)
        logger.info(f"Extracting data (context={context or 'shop'})")
        return await self.extract_json(prompt, transcript)

    async def extract_site_details(self, transcript: str, site_type: SiteType) -> Dict[str, Any]:
        """
        Extracts site fields from an English transcript using the
        Shop or Menu prompt.
        """
        if site_type == SiteType.MENU:
            prompt = MENU_SITE_PROMPT
        else:
            prompt = SHOP_SITE_PROMPT.replace("{current_year}", str(utcnow().year))

        logger.info(f"Extracting {site_type.value} details")
        return await self.extract_json(prompt, f"Transcript: {transcript}")

    async def close(self):
        if self._client is not None:
            await self._client.close()
            self._client = None


# Global LLM service instance
_llm_service: Optional[LLMService] = None


def get_llm_service() -> LLMService:
    """Get or create the global LLM service instance."""
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service


async def close_llm_service():
    """Close the global LLM client (called on shutdown)."""
    global _llm_service
    if _llm_service is not None:
        await _llm_service.close()
        _llm_service = None
