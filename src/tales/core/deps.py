from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from tales.core.engine.story_engine import StoryEngine
from tales.core.errors import SessionNotFoundError
from tales.interfaces.generation import (
    IllustratorPort,
    SpeechSynthesizerPort,
    StoryGeneratorPort,
)
from tales.plugins.gemini.http_client import (
    GeminiIllustrationClient,
    GeminiSpeechClient,
    GeminiStoryClient,
)
from tales.services.session_registry import SessionRegistry


@dataclass(frozen=True)
class GenerationClients:
    story: StoryGeneratorPort
    speech: SpeechSynthesizerPort
    illustration: IllustratorPort

    def new_engine(self) -> StoryEngine:
        return StoryEngine(
            story_client=self.story,
            speech_client=self.speech,
            illustration_client=self.illustration,
        )


def build_clients() -> GenerationClients:
    return GenerationClients(
        story=GeminiStoryClient(),
        speech=GeminiSpeechClient(),
        illustration=GeminiIllustrationClient(),
    )


def get_clients(request: Request) -> GenerationClients:
    """Dependency to get the upstream clients from app state."""
    return request.app.state.clients


def get_registry(request: Request) -> SessionRegistry:
    """Dependency to get the session registry from app state."""
    return request.app.state.registry


def get_engine(
    session_id: str, registry: Annotated[SessionRegistry, Depends(get_registry)]
) -> StoryEngine:
    """Dependency to resolve the engine that owns ``session_id``."""
    try:
        return registry.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
