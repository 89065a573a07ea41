import re

from pydantic import ValidationError

from tales.core.errors import StoryGenerationError
from tales.core.models.story import StoryResult

# ```json ... ``` wrapper the model sometimes adds despite responseMimeType
_CODE_FENCE = re.compile(r"^\s*```[\w-]*[ \t]*\n?(.*?)\n?[ \t]*```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    match = _CODE_FENCE.match(text)
    if match:
        text = match.group(1)
    return text.strip()


def parse_story_result(text: str) -> StoryResult:
    """Strip an optional code fence and validate the body against StoryResult."""
    body = strip_code_fence(text or "")
    if not body:
        raise StoryGenerationError("Story model returned an empty body")

    try:
        return StoryResult.model_validate_json(body)
    except ValidationError as e:
        raise StoryGenerationError(
            f"Story model returned an invalid payload ({e.error_count()} errors)"
        ) from e
