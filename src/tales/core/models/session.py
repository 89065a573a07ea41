import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from tales.core.context_window import ContextWindow
from tales.core.models.input import TurnInputs
from tales.core.models.media import MediaBundle
from tales.core.models.story import StoryResult


class SessionPhase(str, Enum):
    IDLE = "IDLE"
    ANALYZING = "ANALYZING"
    GENERATING_MEDIA = "GENERATING_MEDIA"
    PLAYING = "PLAYING"
    ERROR = "ERROR"


IN_FLIGHT_PHASES = (SessionPhase.ANALYZING, SessionPhase.GENERATING_MEDIA)


class SessionView(BaseModel):
    session_id: str
    phase: SessionPhase
    turn: int = Field(..., description="단조 증가하는 턴 카운터")
    story: Optional[StoryResult] = None
    media: MediaBundle = Field(default_factory=MediaBundle)
    error_message: Optional[str] = None
    previous_topics: List[str] = Field(default_factory=list)


class StorySession:
    """
    한 사용자 세션의 가변 상태.
    엔진 하나가 세션 하나를 소유하며, 전역 상태는 두지 않습니다.
    """

    def __init__(
        self,
        session_id: Optional[str] = None,
        context: Optional[ContextWindow] = None,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.context = context if context is not None else ContextWindow()
        self.phase = SessionPhase.IDLE
        self.turn = 0
        self.story: Optional[StoryResult] = None
        self.media = MediaBundle()
        self.error_message: Optional[str] = None
        self.inputs: Optional[TurnInputs] = None

    @property
    def busy(self) -> bool:
        return self.phase in IN_FLIGHT_PHASES

    def is_current(self, turn: int) -> bool:
        return turn == self.turn

    def begin_turn(self) -> int:
        self.turn += 1
        self.phase = SessionPhase.ANALYZING
        self.story = None
        self.media = MediaBundle()
        self.error_message = None
        return self.turn

    def record_story(self, story: StoryResult) -> None:
        self.story = story
        self.context.append(story.meta.educational_concept)
        self.phase = SessionPhase.GENERATING_MEDIA

    def record_media(self, media: MediaBundle) -> None:
        self.media = media
        self.phase = SessionPhase.PLAYING

    def fail(self, message: str) -> None:
        self.story = None
        self.media = MediaBundle()
        self.error_message = message
        self.phase = SessionPhase.ERROR

    def reset(self) -> None:
        # bumping the counter orphans whatever turn is still in flight
        self.turn += 1
        self.phase = SessionPhase.IDLE
        self.story = None
        self.media = MediaBundle()
        self.error_message = None
        self.inputs = None
        self.context.clear()

    def snapshot(self) -> SessionView:
        return SessionView(
            session_id=self.session_id,
            phase=self.phase,
            turn=self.turn,
            story=self.story,
            media=self.media,
            error_message=self.error_message,
            previous_topics=list(self.context.snapshot()),
        )
