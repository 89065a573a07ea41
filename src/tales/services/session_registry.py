import logging
from typing import Callable, Dict, List

from tales.core.engine.story_engine import StoryEngine
from tales.core.errors import SessionNotFoundError

logger = logging.getLogger(__name__)


class SessionRegistry:
    """In-process map of session id to its engine. Nothing outlives the process."""

    def __init__(self, engine_factory: Callable[[], StoryEngine]):
        self._engine_factory = engine_factory
        self._engines: Dict[str, StoryEngine] = {}

    def create(self) -> StoryEngine:
        engine = self._engine_factory()
        self._engines[engine.session_id] = engine
        logger.info(f"Session {engine.session_id} created ({len(self._engines)} open)")
        return engine

    def get(self, session_id: str) -> StoryEngine:
        try:
            return self._engines[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        if self._engines.pop(session_id, None) is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"Session {session_id} closed")

    def session_ids(self) -> List[str]:
        return list(self._engines)

    def __len__(self) -> int:
        return len(self._engines)
