from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from tales.core.deps import get_engine, get_registry
from tales.core.engine.story_engine import StoryEngine
from tales.core.errors import SessionNotFoundError, TurnInProgressError
from tales.core.models.input import FollowUpSubmission, TurnSubmission
from tales.core.models.session import SessionView
from tales.services.session_registry import SessionRegistry

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SessionView)
async def create_session(
    registry: Annotated[SessionRegistry, Depends(get_registry)],
) -> SessionView:
    return registry.create().view()


@router.get("/{session_id}", response_model=SessionView)
async def get_session(
    engine: Annotated[StoryEngine, Depends(get_engine)],
) -> SessionView:
    return engine.view()


@router.post("/{session_id}/turns", response_model=SessionView)
async def submit_turn(
    submission: TurnSubmission, engine: Annotated[StoryEngine, Depends(get_engine)]
) -> SessionView:
    """
    Runs a whole turn and returns the session once it reaches PLAYING or ERROR.
    A failed story is reported through the session's phase, not as an HTTP error.
    """
    try:
        return await engine.submit(
            submission.question,
            image=submission.to_image(),
            personalization=submission.to_personalization(),
        )
    except TurnInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.post("/{session_id}/follow-ups", response_model=SessionView)
async def submit_follow_up(
    submission: FollowUpSubmission,
    engine: Annotated[StoryEngine, Depends(get_engine)],
) -> SessionView:
    try:
        return await engine.submit_follow_up(submission.question)
    except TurnInProgressError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e


@router.post("/{session_id}/reset", response_model=SessionView)
async def reset_session(
    engine: Annotated[StoryEngine, Depends(get_engine)],
) -> SessionView:
    return engine.reset()


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_session(
    session_id: str, registry: Annotated[SessionRegistry, Depends(get_registry)]
) -> Response:
    try:
        registry.delete(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
