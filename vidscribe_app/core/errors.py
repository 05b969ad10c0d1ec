"""
Exception types raised by the transcription pipeline adapters.

Every error keeps the engine's or provider's message verbatim so the
controller can show it to the user unchanged.
"""


class PipelineError(Exception):
    """Base class for recoverable pipeline failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InitializationError(PipelineError):
    """The transcoding engine could not be loaded."""
    pass


class ExtractionError(PipelineError):
    """The transcoding engine rejected or failed on the input video."""
    pass


class TranscriptionError(PipelineError):
    """The speech-to-text service call failed."""
    pass
