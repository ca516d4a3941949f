"""Custom exceptions for targeting context."""

from typing import Optional


class MalformedScoreDocumentError(ValueError):
    """
    Exception raised when the model's relevance-score document cannot be used.

    Covers invalid JSON, a non-object top level, a category that is not a list, and
    items without a numeric index or score. Always a whole-document failure.

    Attributes:
        message: Error description
        raw_snippet: Leading part of the offending response text
    """

    def __init__(self, message: str, raw_text: Optional[str] = None):
        self.message = message
        self.raw_snippet = None

        parts = [message]

        if raw_text:
            self.raw_snippet = raw_text[:500] + "..." if len(raw_text) > 500 else raw_text
            parts.append(f"\nRaw response:\n{self.raw_snippet}")

        super().__init__("\n".join(parts))


class InvalidResumeDocumentError(ValueError):
    """
    Exception raised when resume YAML does not load into a mapping.

    The resume document must be a mapping with top-level lists (work, projects,
    education, certificates, skills).
    """

    pass
