from typing import Optional, TypedDict

from tales.core.models.input import StoryRequest
from tales.core.models.media import MediaBundle
from tales.core.models.story import StoryResult


class TurnContext(TypedDict, total=False):
    """
    LangGraph의 State로 사용될 턴 컨텍스트.
    세션 상태 자체는 담지 않고, 한 턴의 입력과 산출물만 흘려보냅니다.
    """

    # --- Input ---
    turn_id: int
    request: StoryRequest

    # --- Output ---
    story: Optional[StoryResult]
    media: Optional[MediaBundle]

    # --- Internal/Error ---
    error: Optional[str]
