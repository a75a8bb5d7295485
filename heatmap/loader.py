"""
Document loading and load-cycle orchestration.

A load cycle is: read the raw document (file or URL), repair the few
non-JSON tokens upstream generators emit, decode, normalize, fall back to
the built-in sample set when nothing usable came out, then group the
records by home and by institution location.

Usage:
    result = run_load_cycle()
    result = run_load_cycle(location="https://example.org/personnes.json")
    result = run_load_cycle(DataSource.SAMPLE)
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import httpx
from loguru import logger

from heatmap.aggregation import ConcentrationSummary, aggregate_all, rank_clusters, summarize
from heatmap.config import settings
from heatmap.exceptions import (
    DocumentDecodeError,
    DocumentError,
    DocumentFetchError,
    DocumentStructureError,
)
from heatmap.models import (
    Cluster,
    Location,
    LocationKind,
    NormalizationReport,
    NormalizedRecord,
)
from heatmap.normalizers import normalize_document
from heatmap.samples import sample_records
from heatmap.utils.http import HTTPError, fetch_with_retry

# Bare NaN / undefined in a value position (after ':' '[' or ',')
_BAD_LITERAL_RE = re.compile(r"([:\[,])\s*(?:NaN|undefined)(?=\s*[,}\]])")
# Trailing comma before a closing brace or bracket
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")

NOTICE_LOAD_FAILED = "Could not load the data document ({error}). Showing sample data instead."
NOTICE_NO_VALID_RECORDS = "No valid records found in the data document. Showing sample data instead."


class DataSource(str, Enum):
    """Where a load cycle takes its records from."""
    JSON = "json"       # the configured (or given) JSON document
    SAMPLE = "sample"   # the built-in sample set
    CUSTOM = "custom"   # records supplied by the caller


DocumentLocation = Union[str, Path]


def clean_document_text(text: str) -> str:
    """
    Repair the non-JSON tokens found in exported documents.

    - NaN and undefined used as values become null
    - trailing commas before } or ] are removed

    The repairs are pattern based and do not track string literals, so a
    quoted value such as "a:NaN,b" is rewritten too.
    """
    text = _BAD_LITERAL_RE.sub(r"\1 null", text)
    text = _TRAILING_COMMA_RE.sub(r"\1", text)
    return text


def _suspect_lines(text: str) -> list[int]:
    return [
        number
        for number, line in enumerate(text.splitlines(), start=1)
        if "NaN" in line or "undefined" in line
    ]


def decode_document(text: str, source: Optional[str] = None) -> list[Any]:
    """
    Clean and decode a raw document.

    Args:
        text: Raw document text
        source: Where the text came from, for error messages

    Returns:
        The decoded top-level list

    Raises:
        DocumentDecodeError: If the text is not valid JSON after cleanup
        DocumentStructureError: If the top level is not a list
    """
    cleaned = clean_document_text(text)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        suspects = _suspect_lines(cleaned)
        for number in suspects[:10]:
            logger.debug(f"Suspicious line {number}: {cleaned.splitlines()[number - 1].strip()}")
        raise DocumentDecodeError(
            f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            source=source,
            suspect_lines=suspects,
        ) from e
    except (ValueError, RecursionError) as e:
        # oversized integers and very deep nesting fail outside the parser
        raise DocumentDecodeError(f"Invalid JSON: {e}", source=source) from e

    if not isinstance(data, list):
        raise DocumentStructureError(
            f"Document must contain a list of objects, got {type(data).__name__}",
            source=source,
        )

    logger.info(f"Decoded {len(data)} entries")
    return data


def _is_url(location: DocumentLocation) -> bool:
    return isinstance(location, str) and location.startswith(("http://", "https://"))


def read_document_text(location: DocumentLocation) -> str:
    """
    Read raw document text from a local path or an http(s) URL.

    Raises:
        DocumentFetchError: If the file cannot be read or the fetch fails
        DocumentDecodeError: If the bytes are not valid UTF-8
    """
    if _is_url(location):
        try:
            response = fetch_with_retry(location)
        except (HTTPError, httpx.HTTPError) as e:
            raise DocumentFetchError(f"Fetch failed: {e}", source=location) from e
        try:
            return response.content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise DocumentDecodeError(f"Document is not UTF-8: {e}", source=location) from e

    path = Path(location)
    try:
        return path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as e:
        raise DocumentFetchError(f"File not found: {path}", source=str(path)) from e
    except UnicodeDecodeError as e:
        raise DocumentDecodeError(f"Document is not UTF-8: {e}", source=str(path)) from e
    except OSError as e:
        raise DocumentFetchError(f"Cannot read {path}: {e}", source=str(path)) from e


def resolve_location(location: Optional[DocumentLocation] = None) -> DocumentLocation:
    """Explicit location, else the configured URL, else the configured path."""
    return location or settings.pipeline.data_url or settings.pipeline.data_path


def load_document(location: Optional[DocumentLocation] = None) -> list[Any]:
    """
    Read and decode the raw document.

    Args:
        location: File path or URL (defaults to the configured source)

    Returns:
        Decoded list of raw entries
    """
    location = resolve_location(location)
    logger.info(f"Loading document from {location}")

    text = read_document_text(location)
    logger.debug(f"Document size: {len(text)} characters")

    return decode_document(text, source=str(location))


@dataclass
class LoadResult:
    """Everything one load cycle produces."""
    records: list[NormalizedRecord]
    home_clusters: dict[Location, Cluster]
    institution_clusters: dict[Location, Cluster]
    source: DataSource
    report: NormalizationReport | None = None
    used_fallback: bool = False
    notice: str | None = None
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def clusters(self, kind: LocationKind) -> dict[Location, Cluster]:
        if kind is LocationKind.HOME:
            return self.home_clusters
        return self.institution_clusters

    def ranked(self, kind: LocationKind) -> list[Cluster]:
        return rank_clusters(self.clusters(kind))

    def summary(self, kind: LocationKind) -> ConcentrationSummary:
        return summarize(self.records, self.clusters(kind), kind)


def run_load_cycle(
    source: DataSource = DataSource.JSON,
    location: Optional[DocumentLocation] = None,
    records: Optional[list[NormalizedRecord]] = None,
) -> LoadResult:
    """
    Run one full load cycle.

    Document-level failures and empty results are not raised: the built-in
    sample set is used instead and a notice is attached to the result.

    Args:
        source: Where the records come from
        location: Document path or URL for DataSource.JSON
        records: Caller-supplied records for DataSource.CUSTOM

    Returns:
        LoadResult with records and both cluster groupings
    """
    logger.info(f"Starting load cycle, source: {source.value}")

    report = None
    notice = None
    used_fallback = False
    loaded: list[NormalizedRecord] = []

    if source is DataSource.JSON:
        try:
            document = load_document(location)
            normalized = normalize_document(document)
            loaded = normalized.records
            report = normalized.report
        except DocumentError as e:
            logger.error(f"Could not load document: {e}")
            notice = NOTICE_LOAD_FAILED.format(error=e)
            loaded = sample_records()
            used_fallback = True
    elif source is DataSource.SAMPLE:
        loaded = sample_records()
    else:
        loaded = list(records or [])

    if not loaded:
        logger.warning("No valid records, using sample data")
        notice = NOTICE_NO_VALID_RECORDS
        loaded = sample_records()
        used_fallback = True

    groups = aggregate_all(loaded)
    result = LoadResult(
        records=loaded,
        home_clusters=groups[LocationKind.HOME],
        institution_clusters=groups[LocationKind.INSTITUTION],
        source=source,
        report=report,
        used_fallback=used_fallback,
        notice=notice,
    )

    logger.info(
        f"Load cycle complete: {len(result.records)} records, "
        f"{len(result.home_clusters)} home zones, "
        f"{len(result.institution_clusters)} institution zones"
    )
    return result
