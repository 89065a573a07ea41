from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class MediaBundle(BaseModel):
    """Either handle may be missing on its own; that is not an error for the bundle."""

    model_config = ConfigDict(frozen=True)

    audio_url: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.audio_url is None and self.image_url is None


@dataclass(frozen=True)
class SpeechAudio:
    pcm: bytes
    sample_rate: int


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    mime_type: str = "image/png"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """One settled branch of a fan-out: a value or the exception that ended it."""

    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None
