import asyncio
import base64
import json
import sys

import httpx

BASE_URL = "http://localhost:8020/api/v1"


def _summary(view: dict) -> str:
    story = view.get("story") or {}
    media = view.get("media") or {}
    return json.dumps(
        {
            "phase": view["phase"],
            "title": (story.get("storyboard") or {}).get("title"),
            "audio": bool(media.get("audio_url")),
            "image": bool(media.get("image_url")),
            "topics": view.get("previous_topics"),
            "error": view.get("error_message"),
        },
        indent=2,
        ensure_ascii=False,
    )


async def run_simulation(drawing_path: str | None = None):
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=300.0) as client:
        resp = await client.post("/sessions")
        resp.raise_for_status()
        session_id = resp.json()["session_id"]
        print(f"🔹 Session: {session_id}")

        payload = {
            "question": "Why do apples fall down from trees?",
            "child_name": "Maya",
            "character_name": "Pip",
        }
        if drawing_path:
            with open(drawing_path, "rb") as f:
                payload["image"] = {
                    "data": base64.b64encode(f.read()).decode("ascii"),
                    "mime_type": "image/png",
                }

        print("\n▶ Turn 1")
        resp = await client.post(f"/sessions/{session_id}/turns", json=payload)
        print(f"   Response: {resp.status_code}")
        view = resp.json()
        print(_summary(view))

        suggestions = ((view.get("story") or {}).get("storyboard") or {}).get(
            "suggested_questions"
        ) or ["What else can gravity do?"]

        print(f"\n▶ Follow-up: {suggestions[0]}")
        resp = await client.post(
            f"/sessions/{session_id}/follow-ups", json={"question": suggestions[0]}
        )
        print(f"   Response: {resp.status_code}")
        print(_summary(resp.json()))

        print("\n▶ Reset")
        resp = await client.post(f"/sessions/{session_id}/reset")
        print(_summary(resp.json()))

        await client.delete(f"/sessions/{session_id}")


if __name__ == "__main__":
    asyncio.run(run_simulation(sys.argv[1] if len(sys.argv) > 1 else None))
