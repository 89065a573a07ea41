"""
Stand-in for the Gemini generateContent endpoint.

Run with ``uvicorn mock_services.main:app --port 8060`` and point the
service at it with ``GEMINI_HOST=http://localhost:8060``.
"""
import base64
import json
import math
import struct
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException

app = FastAPI(title="Gemini Mock Service")

SAMPLE_RATE = 24000

# 1x1 transparent PNG
PIXEL_PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)

MOCK_STORY = {
    "meta": {
        "detected_language": "en",
        "educational_concept": "Gravity",
        "context_used": False,
        "character_voice_profile": "brave and bouncy",
    },
    "storyboard": {
        "title": "Pip and the Invisible Magnet",
        "display_text": "Pip let go of the apple [SFX: Thud]. (Surprised) Where did it go?",
        "audio_text": "Pip let go of the apple. THUD! Where did it go?",
        "interactive_question": "What do you think pulled the apple down?",
        "suggested_questions": [
            "Why doesn't the moon fall down?",
            "Is there gravity in space?",
        ],
    },
    "visuals": {"image_prompt": "A small round robot named Pip watching an apple fall"},
}


def _tone(seconds: float = 0.5, hz: float = 440.0) -> bytes:
    frames = int(SAMPLE_RATE * seconds)
    samples = (
        int(8000 * math.sin(2 * math.pi * hz * i / SAMPLE_RATE)) for i in range(frames)
    )
    return struct.pack(f"<{frames}h", *samples)


def _candidate(parts: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "candidates": [
            {"content": {"role": "model", "parts": parts}, "finishReason": "STOP"}
        ]
    }


@app.post("/v1beta/models/{model_action}")
async def generate_content(model_action: str, request: Dict[str, Any]):
    model, _, action = model_action.partition(":")
    if action != "generateContent":
        raise HTTPException(status_code=404, detail=f"Unsupported action: {action}")

    config = request.get("generationConfig", {})
    print(f"[Gemini] {model} called with config keys: {sorted(config)}")

    if "AUDIO" in config.get("responseModalities", []):
        pcm = base64.b64encode(_tone()).decode("ascii")
        return _candidate(
            [
                {
                    "inlineData": {
                        "mimeType": f"audio/L16;codec=pcm;rate={SAMPLE_RATE}",
                        "data": pcm,
                    }
                }
            ]
        )

    if "imageConfig" in config:
        return _candidate(
            [
                {"text": "Here is Pip."},
                {
                    "inlineData": {
                        "mimeType": "image/png",
                        "data": base64.b64encode(PIXEL_PNG).decode("ascii"),
                    }
                },
            ]
        )

    # the real model occasionally fences its JSON; keep the client honest
    body = f"```json\n{json.dumps(MOCK_STORY, indent=2)}\n```"
    return _candidate([{"text": body}])


@app.get("/v1beta/models/{model}")
async def get_model(model: str):
    return {"name": f"models/{model}"}


@app.get("/health")
async def health():
    return {"status": "ok"}
