import asyncio
import logging

import pytest

from tales.core.engine.fan_out import MediaFanOut, settle
from tales.core.errors import MediaGenerationError
from tales.core.models.media import SpeechAudio


async def _value(v, delay=0.0):
    await asyncio.sleep(delay)
    return v


async def _boom(delay=0.0):
    await asyncio.sleep(delay)
    raise MediaGenerationError("boom")


@pytest.mark.asyncio
async def test_settle_keeps_argument_order_and_tags_each_branch():
    first, second, third = await settle(_value("slow", 0.02), _boom(), _value("fast"))

    assert first.ok and first.value == "slow"
    assert not second.ok and isinstance(second.error, MediaGenerationError)
    assert third.ok and third.value == "fast"


@pytest.mark.asyncio
async def test_settle_waits_for_the_slow_branch_after_an_early_failure():
    failed, late = await settle(_boom(), _value("late", 0.05))

    assert not failed.ok
    assert late.value == "late"


@pytest.mark.asyncio
async def test_both_media_succeed(speech_client, illustration_client):
    bundle = await MediaFanOut(speech_client, illustration_client).run("Hi!", "a cat")

    assert bundle.audio_url.startswith("data:audio/wav;base64,")
    assert bundle.image_url.startswith("data:image/png;base64,")
    speech_client.synthesize.assert_awaited_once_with("Hi!")
    illustration_client.illustrate.assert_awaited_once_with("a cat")


@pytest.mark.asyncio
async def test_speech_failure_keeps_the_illustration(
    speech_client, illustration_client, caplog
):
    speech_client.synthesize.side_effect = MediaGenerationError("tts down")

    with caplog.at_level(logging.WARNING, logger="tales.core.engine.fan_out"):
        bundle = await MediaFanOut(speech_client, illustration_client).run("Hi!", "a cat")

    assert bundle.audio_url is None
    assert bundle.image_url is not None
    assert "audio generation failed" in caplog.text
    assert "tts down" in caplog.text


@pytest.mark.asyncio
async def test_bad_pcm_is_treated_as_missing_audio(speech_client, illustration_client):
    speech_client.synthesize.return_value = SpeechAudio(pcm=b"\x01\x02\x03", sample_rate=24000)

    bundle = await MediaFanOut(speech_client, illustration_client).run("Hi!", "a cat")

    assert bundle.audio_url is None
    assert bundle.image_url is not None


@pytest.mark.asyncio
async def test_both_failures_give_an_empty_bundle(speech_client, illustration_client):
    speech_client.synthesize.side_effect = MediaGenerationError("tts down")
    illustration_client.illustrate.side_effect = RuntimeError("unexpected")

    bundle = await MediaFanOut(speech_client, illustration_client).run("Hi!", "a cat")

    assert bundle.is_empty
