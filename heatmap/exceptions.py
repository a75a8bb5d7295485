"""
Exception hierarchy for the heatmap pipeline.

Only document-level failures are raised. Per-entry problems are counted in
the normalization report and never surface as exceptions.
"""


class HeatmapError(Exception):
    """Base class for all pipeline errors."""
    pass


class DocumentError(HeatmapError):
    """The input document could not be obtained or decoded."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class DocumentFetchError(DocumentError):
    """The document file is missing/unreadable or the HTTP fetch failed."""
    pass


class DocumentDecodeError(DocumentError):
    """The document text is not valid JSON, even after cleanup."""

    def __init__(self, message: str, source: str | None = None, suspect_lines: list[int] | None = None):
        super().__init__(message, source=source)
        # 1-based line numbers that still contain NaN/undefined tokens
        self.suspect_lines = suspect_lines or []


class DocumentStructureError(DocumentError):
    """The decoded document is not a top-level sequence of entries."""
    pass
