from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GeminiModel(BaseModel):
    """REST 본문은 camelCase, 파이썬 쪽은 snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class InlineData(GeminiModel):
    mime_type: Optional[str] = None
    data: str  # base64


class Part(GeminiModel):
    text: Optional[str] = None
    inline_data: Optional[InlineData] = None


class Content(GeminiModel):
    role: Optional[str] = None
    parts: List[Part] = []


class PrebuiltVoiceConfig(GeminiModel):
    voice_name: str


class VoiceConfig(GeminiModel):
    prebuilt_voice_config: PrebuiltVoiceConfig


class SpeechConfig(GeminiModel):
    voice_config: VoiceConfig


class ImageConfig(GeminiModel):
    aspect_ratio: str


class GenerationConfig(GeminiModel):
    response_mime_type: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    response_modalities: Optional[List[str]] = None
    speech_config: Optional[SpeechConfig] = None
    image_config: Optional[ImageConfig] = None


class GenerateContentRequest(GeminiModel):
    contents: List[Content]
    system_instruction: Optional[Content] = None
    generation_config: Optional[GenerationConfig] = None


class Candidate(GeminiModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None


class GenerateContentResponse(GeminiModel):
    candidates: List[Candidate] = []

    def first_parts(self) -> List[Part]:
        if not self.candidates or not self.candidates[0].content:
            return []
        return self.candidates[0].content.parts

    @property
    def text(self) -> str:
        return "".join(p.text for p in self.first_parts() if p.text)

    def first_inline_data(self) -> Optional[InlineData]:
        for part in self.first_parts():
            if part.inline_data is not None:
                return part.inline_data
        return None
