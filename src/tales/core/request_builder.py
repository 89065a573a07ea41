import base64
import json
from typing import List

from tales.core.models.input import DEFAULT_CHILD_NAME, StoryRequest
from tales.core.prompts import NO_IMAGE_NOTE
from tales.schemas.gemini import InlineData, Part


def build_context(request: StoryRequest) -> dict:
    personalization = request.personalization
    return {
        "child_name": personalization.child_name or DEFAULT_CHILD_NAME,
        "character_name": personalization.character_name or "",
        "prev_topics": list(request.previous_topics),
    }


def build_story_parts(request: StoryRequest) -> List[Part]:
    """
    Assemble the multimodal input for one story call.

    The drawing, when there is one, goes first as inline base64 data; the
    model reads parts left to right and the question refers to it. The
    image bytes are passed through as-is.
    """
    parts: List[Part] = []

    if request.image is not None:
        parts.append(
            Part(
                inline_data=InlineData(
                    mime_type=request.image.mime_type,
                    data=base64.b64encode(request.image.data).decode("ascii"),
                )
            )
        )

    text = (
        f"User Question: {request.question}\n"
        f"Context: {json.dumps(build_context(request), ensure_ascii=False)}"
    )
    if request.image is None:
        text += f"\n{NO_IMAGE_NOTE}"

    parts.append(Part(text=text))
    return parts
