import asyncio

from tales.core.audio import encode_wav
from tales.core.models.input import StoryRequest
from tales.core.parsing import parse_story_result
from tales.core.request_builder import build_story_parts
from tales.plugins.gemini.http_client import (
    GeminiIllustrationClient,
    GeminiSpeechClient,
    GeminiStoryClient,
)


async def main():
    story_client = GeminiStoryClient()
    speech_client = GeminiSpeechClient()
    illustration_client = GeminiIllustrationClient()

    for client in (story_client, speech_client, illustration_client):
        print(f"{client.model}: healthy={await client.check_health()}")

    request = StoryRequest(question="Why is the sky blue?")
    raw = await story_client.generate(build_story_parts(request))
    story = parse_story_result(raw)
    print(f"Story: {story.storyboard.title} ({story.meta.educational_concept})")

    speech = await speech_client.synthesize(story.storyboard.audio_text)
    with open("probe.wav", "wb") as f:
        f.write(encode_wav(speech.pcm, speech.sample_rate))
    print(f"Audio: {len(speech.pcm)} bytes at {speech.sample_rate} Hz -> probe.wav")

    image = await illustration_client.illustrate(story.visuals.image_prompt)
    print(f"Image: {len(image.data)} bytes ({image.mime_type})")


if __name__ == "__main__":
    asyncio.run(main())
