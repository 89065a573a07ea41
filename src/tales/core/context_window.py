from collections import deque
from typing import Deque, Tuple

from tales.core.config import settings


class ContextWindow:
    """
    세션 단위의 최근 학습 주제 목록 (FIFO, 기본 용량 3).
    다음 요청의 prev_topics로 그대로 전달됩니다.
    """

    def __init__(self, capacity: int = settings.CONTEXT_WINDOW_SIZE):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._topics: Deque[str] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._topics.maxlen or 0

    def append(self, topic: str) -> None:
        # deque(maxlen) drops the oldest entry on overflow
        self._topics.append(topic)

    def snapshot(self) -> Tuple[str, ...]:
        return tuple(self._topics)

    def clear(self) -> None:
        self._topics.clear()

    def __len__(self) -> int:
        return len(self._topics)
