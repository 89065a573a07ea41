import base64
import copy
import json
from typing import Any, Callable, Dict, Optional
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
import respx
from httpx import ASGITransport, AsyncClient, Response

from tales.core.config import settings
from tales.core.deps import GenerationClients
from tales.core.engine.story_engine import StoryEngine
from tales.core.models.media import GeneratedImage, SpeechAudio
from tales.main import app
from tales.plugins.gemini.http_client import (
    GeminiIllustrationClient,
    GeminiSpeechClient,
    GeminiStoryClient,
)
from tales.services.session_registry import SessionRegistry

STORY_PAYLOAD: Dict[str, Any] = {
    "meta": {
        "detected_language": "en",
        "educational_concept": "Gravity",
        "context_used": False,
        "character_voice_profile": "bold and brave",
    },
    "storyboard": {
        "title": "Rex and the Invisible Magnet",
        "display_text": "The apple fell [SFX: Thud]. (Curious) Why down?",
        "audio_text": "The apple fell. THUD! Why down?",
        "interactive_question": "What pulls things to the ground?",
        "suggested_questions": ["Why doesn't the moon fall?", "Is there gravity on Mars?"],
    },
    "visuals": {"image_prompt": "A green dinosaur looking up at an apple tree"},
}

PCM_BYTES = b"\x01\x02\x03\x04"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def story_url() -> str:
    return f"{settings.GEMINI_MODELS_URL}/{settings.STORY_MODEL_NAME}:generateContent"


def speech_url() -> str:
    return f"{settings.GEMINI_MODELS_URL}/{settings.SPEECH_MODEL_NAME}:generateContent"


def illustration_url() -> str:
    return (
        f"{settings.GEMINI_MODELS_URL}/{settings.ILLUSTRATION_MODEL_NAME}:generateContent"
    )


def gemini_response(*parts: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": list(parts)}, "finishReason": "STOP"}
        ]
    }


def inline_part(mime_type: str, data: bytes) -> Dict[str, Any]:
    return {
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(data).decode("ascii"),
        }
    }


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_story_text() -> Callable[..., str]:
    """스토리 JSON 본문을 만듭니다. fenced=True면 ```json 코드 블록으로 감쌉니다."""

    def _make(concept: Optional[str] = None, fenced: bool = False) -> str:
        payload = copy.deepcopy(STORY_PAYLOAD)
        if concept:
            payload["meta"]["educational_concept"] = concept
        body = json.dumps(payload)
        return f"```json\n{body}\n```" if fenced else body

    return _make


@pytest.fixture
def story_client(make_story_text):
    client = AsyncMock()
    client.generate.return_value = make_story_text()
    client.check_health.return_value = True
    return client


@pytest.fixture
def speech_client():
    client = AsyncMock()
    client.synthesize.return_value = SpeechAudio(pcm=PCM_BYTES, sample_rate=24000)
    client.check_health.return_value = True
    return client


@pytest.fixture
def illustration_client():
    client = AsyncMock()
    client.illustrate.return_value = GeneratedImage(data=PNG_BYTES, mime_type="image/png")
    client.check_health.return_value = True
    return client


@pytest.fixture
def engine(story_client, speech_client, illustration_client):
    """외부 호출을 AsyncMock으로 대체한 엔진."""
    return StoryEngine(
        story_client=story_client,
        speech_client=speech_client,
        illustration_client=illustration_client,
    )


@pytest.fixture
def gemini_mock(make_story_text):
    """
    Gemini REST 호출을 가로챕니다.
    테스트마다 라우트의 return_value/side_effect를 덮어쓸 수 있습니다.
    """
    with respx.mock(assert_all_called=False) as mock:
        mock.post(story_url(), name="story").mock(
            return_value=Response(
                200, json=gemini_response({"text": make_story_text(fenced=True)})
            )
        )
        mock.post(speech_url(), name="speech").mock(
            return_value=Response(
                200,
                json=gemini_response(
                    inline_part("audio/L16;codec=pcm;rate=24000", PCM_BYTES)
                ),
            )
        )
        mock.post(illustration_url(), name="illustration").mock(
            return_value=Response(
                200,
                json=gemini_response(
                    {"text": "Here you go."}, inline_part("image/png", PNG_BYTES)
                ),
            )
        )
        yield mock


@pytest.fixture(autouse=True)
def override_app_state():
    """
    lifespan을 건너뛰는 테스트를 위해 app.state를 직접 채웁니다.
    """
    clients = GenerationClients(
        story=GeminiStoryClient(api_key="test-key"),
        speech=GeminiSpeechClient(api_key="test-key"),
        illustration=GeminiIllustrationClient(api_key="test-key"),
    )
    app.state.clients = clients
    app.state.registry = SessionRegistry(clients.new_engine)
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client():
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c
