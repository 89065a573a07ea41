import functools
import logging
from typing import Any, Callable, Optional, TypeVar, cast

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from tales.core.config import settings
from tales.core.engine.fan_out import MediaFanOut
from tales.core.errors import TurnInProgressError
from tales.core.models.context import TurnContext
from tales.core.models.input import ImageInput, Personalization, StoryRequest, TurnInputs
from tales.core.models.session import SessionView, StorySession
from tales.core.parsing import parse_story_result
from tales.core.request_builder import build_story_parts
from tales.interfaces.generation import (
    IllustratorPort,
    SpeechSynthesizerPort,
    StoryGeneratorPort,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def log_node_execution(func: F) -> F:
    """Decorator to log node execution."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        node_name = func.__name__
        logger.info(f"▶ START Node: [{node_name}]")
        try:
            result = await func(*args, **kwargs)
            logger.info(f"✔ END Node: [{node_name}]")
            if result:
                logger.info(f"   -> Updates: {list(result.keys())}")
            return result
        except Exception as e:
            logger.error(f"ERROR in Node [{node_name}]: {e}")
            raise e

    return cast(F, wrapper)


class StoryEngine:
    """
    Drives one session through Idle → Analyzing → GeneratingMedia → Playing.

    Text comes first because the speech and illustration prompts are taken
    from it; the two media calls then run concurrently. Only a failed text
    call puts the session in Error. Every write to the session is checked
    against the turn counter, so a turn that was reset or superseded while
    in flight cannot touch the newer state.
    """

    def __init__(
        self,
        story_client: StoryGeneratorPort,
        speech_client: SpeechSynthesizerPort,
        illustration_client: IllustratorPort,
        session: Optional[StorySession] = None,
    ):
        self.story_client = story_client
        self.speech_client = speech_client
        self.illustration_client = illustration_client
        self.session = session or StorySession()
        self.fan_out = MediaFanOut(speech_client, illustration_client)
        self.graph: CompiledStateGraph = self._build_graph()

    @property
    def session_id(self) -> str:
        return self.session.session_id

    async def submit(
        self,
        question: str,
        image: Optional[ImageInput] = None,
        personalization: Optional[Personalization] = None,
    ) -> SessionView:
        """Start a fresh top-level turn; its inputs replace the retained ones."""
        inputs = TurnInputs(
            image=image, personalization=personalization or Personalization()
        )
        return await self._run_turn(question, inputs, retain=True)

    async def submit_follow_up(self, question: str) -> SessionView:
        """Ask another question about the same drawing and personalization."""
        inputs = self.session.inputs or TurnInputs()
        return await self._run_turn(question, inputs)

    def reset(self) -> SessionView:
        self.session.reset()
        logger.info(f"Session {self.session_id} reset")
        return self.session.snapshot()

    def view(self) -> SessionView:
        return self.session.snapshot()

    async def _run_turn(
        self, question: str, inputs: TurnInputs, retain: bool = False
    ) -> SessionView:
        if self.session.busy:
            raise TurnInProgressError(
                f"Session {self.session_id} is already {self.session.phase.value}"
            )

        # validated before any state changes so a bad question leaves the session as is
        request = StoryRequest.from_turn(inputs, question, self.session.context.snapshot())

        if retain:
            self.session.inputs = inputs
        turn_id = self.session.begin_turn()
        logger.info(f"Session {self.session_id}: turn {turn_id} started")

        await self.graph.ainvoke({"turn_id": turn_id, "request": request})
        return self.session.snapshot()

    def _is_stale(self, turn_id: int) -> bool:
        if self.session.is_current(turn_id):
            return False
        logger.info(
            f"   -> Dropping result of stale turn {turn_id} "
            f"(session is on turn {self.session.turn})"
        )
        return True

    @log_node_execution
    async def analyze(self, state: TurnContext) -> TurnContext:
        """Generate the story text and update the topic history."""
        turn_id = state["turn_id"]
        parts = build_story_parts(state["request"])

        try:
            raw = await self.story_client.generate(parts)
            story = parse_story_result(raw)
        except Exception as e:
            logger.error(f"Story generation failed: {e}")
            if self._is_stale(turn_id):
                return {}
            self.session.fail(settings.FRIENDLY_ERROR_MESSAGE)
            return {"error": str(e)}

        if self._is_stale(turn_id):
            return {}

        self.session.record_story(story)
        logger.info(f"   -> Concept: {story.meta.educational_concept}")
        return {"story": story}

    def _route_after_analysis(self, state: TurnContext) -> str:
        return "generate_media" if state.get("story") else END

    @log_node_execution
    async def generate_media(self, state: TurnContext) -> TurnContext:
        """Narration and illustration; missing media never fails the turn."""
        story = state["story"]
        media = await self.fan_out.run(
            story.storyboard.audio_text, story.visuals.image_prompt
        )

        if self._is_stale(state["turn_id"]):
            return {}

        if media.is_empty:
            logger.warning("   -> Story will play without audio and illustration")
        self.session.record_media(media)
        return {"media": media}

    def _build_graph(self) -> CompiledStateGraph:
        workflow = StateGraph(TurnContext)

        workflow.add_node("analyze", self.analyze)
        workflow.add_node("generate_media", self.generate_media)

        workflow.set_entry_point("analyze")

        workflow.add_conditional_edges(
            "analyze",
            self._route_after_analysis,
            {"generate_media": "generate_media", END: END},
        )
        workflow.add_edge("generate_media", END)

        return workflow.compile()
