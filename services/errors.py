"""Error taxonomy for the scan workflow."""

ANALYSIS_FAILED_MESSAGE = (
    "Failed to process satellite imagery. Please check your connection and try again."
)
DECODE_FAILED_MESSAGE = "The selected file could not be read as an image."


class OrbitalEyeError(Exception):
    """Base class for failures that end up as a user-facing session error."""

    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DecodeError(OrbitalEyeError):
    """The uploaded file could not be read as an image."""

    default_message = DECODE_FAILED_MESSAGE


class AnalysisError(OrbitalEyeError):
    """Any transport, parsing, or schema failure from the classifier.

    The message is always the fixed user-facing text; the underlying cause is
    logged and chained, never surfaced.
    """

    default_message = ANALYSIS_FAILED_MESSAGE

    def __init__(self) -> None:
        super().__init__(ANALYSIS_FAILED_MESSAGE)
