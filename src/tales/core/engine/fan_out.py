import asyncio
import logging
from typing import Any, Awaitable, List, Optional

from tales.core.audio import encode_wav, to_data_uri
from tales.core.models.media import MediaBundle, Outcome
from tales.interfaces.generation import IllustratorPort, SpeechSynthesizerPort

logger = logging.getLogger(__name__)


async def _capture(aw: Awaitable[Any]) -> Outcome[Any]:
    try:
        return Outcome(value=await aw)
    except Exception as e:
        return Outcome(error=e)


async def settle(*aws: Awaitable[Any]) -> List[Outcome[Any]]:
    """
    Run awaitables concurrently and wait for every one of them to finish.

    Each result is tagged ok/failed on its own branch, so one failure can
    neither discard a sibling's value nor make the whole call raise.
    Results keep the argument order, not the completion order.
    """
    return list(await asyncio.gather(*(_capture(aw) for aw in aws)))


class MediaFanOut:
    """Speech and illustration generation for one story, run side by side."""

    def __init__(
        self,
        speech_client: SpeechSynthesizerPort,
        illustration_client: IllustratorPort,
    ):
        self.speech_client = speech_client
        self.illustration_client = illustration_client

    async def run(self, audio_text: str, image_prompt: str) -> MediaBundle:
        audio, image = await settle(
            self._narrate(audio_text), self._illustrate(image_prompt)
        )
        return MediaBundle(
            audio_url=self._unwrap("audio", audio),
            image_url=self._unwrap("illustration", image),
        )

    async def _narrate(self, audio_text: str) -> str:
        speech = await self.speech_client.synthesize(audio_text)
        wav = encode_wav(speech.pcm, speech.sample_rate)
        return to_data_uri(wav, "audio/wav")

    async def _illustrate(self, image_prompt: str) -> str:
        image = await self.illustration_client.illustrate(image_prompt)
        return to_data_uri(image.data, image.mime_type)

    @staticmethod
    def _unwrap(branch: str, outcome: Outcome[str]) -> Optional[str]:
        if outcome.ok:
            return outcome.value
        # diagnostics only, never surfaced to the user
        logger.warning(
            f"{branch} generation failed: {type(outcome.error).__name__}: {outcome.error}"
        )
        return None
