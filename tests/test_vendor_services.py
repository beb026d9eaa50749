import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest

from app.core.config import settings
from app.core.exceptions import ExternalServiceError
from app.models.site import SiteType
from app.services.llm_service import LLMService
from app.services.sarvam_service import SarvamService
from utils.prompts import MENU_SITE_PROMPT, NAME_EXTRACTION_PROMPT, SHOP_EXTRACTION_PROMPT
from utils.time_utils import utcnow


# ============================================================================
# SARVAM
# ============================================================================

def sarvam_with(handler, api_key="test-key"):
    return SarvamService(
        api_key=api_key,
        base_url="https://sarvam.test/",
        transport=httpx.MockTransport(handler)
    )


def test_transcribe_posts_multipart():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["api-subscription-key"]
        seen["body"] = request.content
        return httpx.Response(200, json={"transcript": "Murugan Stores"})

    transcript = asyncio.run(sarvam_with(handler).transcribe(b"audio-bytes", "clip.mp3"))

    assert transcript == "Murugan Stores"
    assert seen["url"] == "https://sarvam.test/speech-to-text"
    assert seen["key"] == "test-key"
    assert b'name="model"' in seen["body"]
    assert settings.SARVAM_STT_MODEL.encode() in seen["body"]
    assert b"unknown" in seen["body"]
    assert b'filename="clip.mp3"' in seen["body"]
    assert b"audio/mpeg" in seen["body"]


def test_translate_uses_translate_endpoint():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["body"] = request.content
        return httpx.Response(200, json={"transcript": None})

    transcript = asyncio.run(sarvam_with(handler).transcribe_and_translate(b"audio", "recording.webm"))

    assert transcript == ""
    assert seen["url"] == "https://sarvam.test/speech-to-text-translate"
    assert settings.SARVAM_TRANSLATE_MODEL.encode() in seen["body"]


def test_sarvam_error_status():
    def handler(request):
        return httpx.Response(400, text="bad audio")

    with pytest.raises(ExternalServiceError) as exc:
        asyncio.run(sarvam_with(handler).transcribe(b"audio", "a.webm"))

    assert exc.value.message == "Sarvam API error: bad audio"
    assert exc.value.details == {"status_code": 400}
    assert exc.value.status_code == 502


def test_sarvam_network_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ExternalServiceError):
        asyncio.run(sarvam_with(handler).transcribe(b"audio", "a.webm"))


def test_sarvam_not_configured():
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(ExternalServiceError) as exc:
        asyncio.run(sarvam_with(handler, api_key="").transcribe(b"audio", "a.webm"))
    assert exc.value.message == "Speech-to-text service is not configured"


# ============================================================================
# LLM
# ============================================================================

class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def llm_with(content):
    completions = FakeCompletions(content)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LLMService(client=client), completions


def test_extract_by_context_uses_step_prompt():
    service, completions = llm_with(json.dumps({"name": "Murugan Stores"}))

    result = asyncio.run(service.extract_by_context("murugan stores", "name"))

    assert result == {"name": "Murugan Stores"}
    call = completions.calls[0]
    assert call["messages"][0] == {"role": "system", "content": NAME_EXTRACTION_PROMPT}
    assert call["messages"][1] == {"role": "user", "content": "murugan stores"}
    assert call["response_format"] == {"type": "json_object"}
    assert call["temperature"] == settings.OPENAI_TEMPERATURE


def test_extract_by_context_defaults_to_full_shop():
    service, completions = llm_with("{}")
    asyncio.run(service.extract_by_context("something", None))
    assert completions.calls[0]["messages"][0]["content"] == SHOP_EXTRACTION_PROMPT


def test_extract_site_details_prompts():
    service, completions = llm_with('{"name": "Cafe"}')

    asyncio.run(service.extract_site_details("a cafe", SiteType.MENU))
    assert completions.calls[0]["messages"][0]["content"] == MENU_SITE_PROMPT
    assert completions.calls[0]["messages"][1]["content"] == "Transcript: a cafe"

    asyncio.run(service.extract_site_details("a shop", SiteType.SHOP))
    shop_prompt = completions.calls[1]["messages"][0]["content"]
    assert "{current_year}" not in shop_prompt
    assert str(utcnow().year) in shop_prompt


def test_empty_reply_is_empty_dict():
    service, _ = llm_with(None)
    assert asyncio.run(service.extract_json("prompt", "text")) == {}


@pytest.mark.parametrize("content", ["not json", "[1, 2]"])
def test_unparseable_reply(content):
    service, _ = llm_with(content)
    with pytest.raises(ExternalServiceError) as exc:
        asyncio.run(service.extract_json("prompt", "text"))
    assert exc.value.message == "Failed to parse extracted data"


def test_llm_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    with pytest.raises(ExternalServiceError):
        asyncio.run(LLMService().extract_json("prompt", "text"))
