from abc import ABC, abstractmethod
from typing import List

from tales.core.models.media import GeneratedImage, SpeechAudio
from tales.schemas.gemini import Part


class StoryGeneratorPort(ABC):
    @abstractmethod
    async def generate(self, parts: List[Part]) -> str:
        """Return the raw story text (possibly fenced JSON)."""
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        pass


class SpeechSynthesizerPort(ABC):
    @abstractmethod
    async def synthesize(self, text: str) -> SpeechAudio:
        """Return raw mono 16-bit PCM and its sample rate."""
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        pass


class IllustratorPort(ABC):
    @abstractmethod
    async def illustrate(self, prompt: str) -> GeneratedImage:
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        pass
