import base64
import binascii
import logging
import re
from typing import List, Optional, Type

import httpx

from tales.core.config import settings
from tales.core.errors import MediaGenerationError, StoryGenerationError, TalesError
from tales.core.models.media import GeneratedImage, SpeechAudio
from tales.core.prompts import STORY_RESPONSE_SCHEMA, SYSTEM_INSTRUCTION
from tales.interfaces.generation import (
    IllustratorPort,
    SpeechSynthesizerPort,
    StoryGeneratorPort,
)
from tales.schemas.gemini import (
    Content,
    GenerateContentRequest,
    GenerateContentResponse,
    GenerationConfig,
    ImageConfig,
    Part,
    PrebuiltVoiceConfig,
    SpeechConfig,
    VoiceConfig,
)

logger = logging.getLogger(__name__)

_RATE_PARAM = re.compile(r"rate=(\d+)")

# Calls are never retried; resubmitting is up to the caller.


class GeminiHTTPClient:
    """Shared plumbing for the generateContent REST endpoint."""

    error_type: Type[TalesError] = TalesError

    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.model = model
        self.api_key = (
            api_key
            if api_key is not None
            else settings.GEMINI_API_KEY.get_secret_value()
        )
        self.base_url = base_url or settings.GEMINI_MODELS_URL
        self.timeout = timeout or settings.REQUEST_TIMEOUT_SECONDS

    def _headers(self) -> dict:
        return {"x-goog-api-key": self.api_key}

    async def _generate_content(
        self, body: GenerateContentRequest
    ) -> GenerateContentResponse:
        url = f"{self.base_url}/{self.model}:generateContent"
        logger.debug(f"POST {url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url, json=body.to_wire(), headers=self._headers()
                )
                response.raise_for_status()
                return GenerateContentResponse.model_validate(response.json())
        except httpx.HTTPError as e:
            raise self.error_type(f"{self.model} request failed: {e}") from e
        except ValueError as e:
            # undecodable JSON or an unexpected response shape
            raise self.error_type(f"{self.model} returned a malformed body") from e

    async def check_health(self) -> bool:
        url = f"{self.base_url}/{self.model}"
        try:
            async with httpx.AsyncClient(timeout=3.0) as client:
                resp = await client.get(url, headers=self._headers())
                return resp.status_code == 200
        except Exception:
            return False


class GeminiStoryClient(GeminiHTTPClient, StoryGeneratorPort):
    error_type = StoryGenerationError

    def __init__(self, model: Optional[str] = None, **kwargs):
        super().__init__(model or settings.STORY_MODEL_NAME, **kwargs)

    async def generate(self, parts: List[Part]) -> str:
        body = GenerateContentRequest(
            contents=[Content(parts=parts)],
            system_instruction=Content(parts=[Part(text=SYSTEM_INSTRUCTION)]),
            generation_config=GenerationConfig(
                response_mime_type="application/json",
                response_schema=STORY_RESPONSE_SCHEMA,
            ),
        )
        response = await self._generate_content(body)

        text = response.text
        if not text:
            raise StoryGenerationError("No response from story model")
        return text


class GeminiSpeechClient(GeminiHTTPClient, SpeechSynthesizerPort):
    error_type = MediaGenerationError

    def __init__(
        self,
        model: Optional[str] = None,
        voice_name: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(model or settings.SPEECH_MODEL_NAME, **kwargs)
        self.voice_name = voice_name or settings.SPEECH_VOICE_NAME

    async def synthesize(self, text: str) -> SpeechAudio:
        body = GenerateContentRequest(
            contents=[Content(parts=[Part(text=text)])],
            generation_config=GenerationConfig(
                response_modalities=["AUDIO"],
                speech_config=SpeechConfig(
                    voice_config=VoiceConfig(
                        prebuilt_voice_config=PrebuiltVoiceConfig(
                            voice_name=self.voice_name
                        )
                    )
                ),
            ),
        )
        response = await self._generate_content(body)

        inline = response.first_inline_data()
        if inline is None or not inline.data:
            raise MediaGenerationError("Failed to generate speech: no audio data")

        return SpeechAudio(
            pcm=_decode_base64(inline.data, "speech"),
            sample_rate=_sample_rate_from_mime(inline.mime_type),
        )


class GeminiIllustrationClient(GeminiHTTPClient, IllustratorPort):
    error_type = MediaGenerationError

    def __init__(
        self,
        model: Optional[str] = None,
        aspect_ratio: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(model or settings.ILLUSTRATION_MODEL_NAME, **kwargs)
        self.aspect_ratio = aspect_ratio or settings.ILLUSTRATION_ASPECT_RATIO

    async def illustrate(self, prompt: str) -> GeneratedImage:
        body = GenerateContentRequest(
            contents=[Content(parts=[Part(text=prompt)])],
            generation_config=GenerationConfig(
                image_config=ImageConfig(aspect_ratio=self.aspect_ratio),
            ),
        )
        response = await self._generate_content(body)

        # the image part may follow a text part describing it
        inline = response.first_inline_data()
        if inline is None or not inline.data:
            raise MediaGenerationError("Failed to generate illustration: no image part")

        return GeneratedImage(
            data=_decode_base64(inline.data, "illustration"),
            mime_type=inline.mime_type or "image/png",
        )


def _decode_base64(data: str, kind: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise MediaGenerationError(f"Undecodable {kind} payload") from e


def _sample_rate_from_mime(mime_type: Optional[str]) -> int:
    # e.g. "audio/L16;codec=pcm;rate=24000"
    match = _RATE_PARAM.search(mime_type or "")
    if match:
        return int(match.group(1))
    return settings.SPEECH_SAMPLE_RATE
