class TalesError(Exception):
    """Base class for every error raised by the story pipeline."""


class StoryGenerationError(TalesError):
    """The story text call failed or returned something unusable. Fatal to the turn."""


class MediaGenerationError(TalesError):
    """A speech or illustration call failed. Degrades the turn, never fails it."""


class AudioEncodingError(MediaGenerationError):
    """Raw PCM could not be wrapped in a WAV container."""


class TurnInProgressError(TalesError):
    """A turn was submitted while another one is still running for the session."""


class SessionNotFoundError(TalesError):
    def __init__(self, session_id: str):
        super().__init__(f"Unknown session: {session_id}")
        self.session_id = session_id
