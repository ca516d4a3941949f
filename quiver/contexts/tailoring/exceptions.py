"""Custom exceptions for tailoring context."""

from typing import Optional


class InvalidLLMResponseError(ValueError):
    """
    Exception raised when the model never produced a usable structured response.

    Attributes:
        attempts: Number of completions requested
        last_error: Parse or validation error from the final attempt
    """

    def __init__(self, attempts: int, last_error: Optional[Exception] = None):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts: {last_error}")


class StageFailure(RuntimeError):
    """
    Exception raised when a pipeline stage cannot complete.

    Aborts the remaining stages and hands control to the fallback chain.

    Attributes:
        stage: Name of the failed stage
        original_error: The underlying exception
    """

    def __init__(self, stage: str, original_error: Optional[Exception] = None):
        self.stage = stage
        self.original_error = original_error

        message = f"Stage '{stage}' failed"
        if original_error:
            message += f": {original_error}"

        super().__init__(message)
