"""
Record normalization.

Turns a decoded source document (a list of loosely-typed objects) into
NormalizedRecord objects. Malformed entries are dropped and counted in a
NormalizationReport; only a document that is not a list raises.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional

from loguru import logger

from heatmap.config import settings
from heatmap.exceptions import DocumentStructureError
from heatmap.models import NormalizationReport, NormalizationResult, NormalizedRecord
from heatmap.normalizers.coordinates import (
    extract_home_location,
    extract_institution_location,
)

# Field aliases, first non-empty value wins.
# The underscore names are what the spreadsheet export produces.
SURNAME_KEYS = ("nom", "surname")
GIVEN_NAME_KEYS = ("prenom", "givenname")
HOME_ADDRESS_KEYS = ("adresse_domicile", "adresseDomicile")
INSTITUTION_ADDRESS_KEYS = ("adresse_etablissement", "adresseEtablissement")
CITY_KEYS = ("ville",)
POSTAL_CODE_KEYS = ("code_postal", "codePostal")

# Only the first few rejections are logged individually
VERBOSE_REJECTION_LIMIT = 5


def clean_text(value: Any) -> str:
    """
    Narrow a raw scalar to stripped text.

    Strings are stripped, finite numbers are rendered (integral floats
    without a trailing ".0"). Anything else counts as empty.
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    return ""


def first_text(entry: Mapping, keys: tuple[str, ...]) -> str:
    """Return the first non-empty text value among the given keys."""
    for key in keys:
        text = clean_text(entry.get(key))
        if text:
            return text
    return ""


def build_record_id(given_name: Optional[str], surname: Optional[str], index: int) -> str:
    """Display identifier: full name, either half of it, or a positional placeholder."""
    if given_name and surname:
        return f"{given_name} {surname}"
    if surname:
        return surname
    if given_name:
        return given_name
    return f"Record {index + 1}"


def _reject(report: NormalizationReport, entry: Any, sample_size: int) -> None:
    if len(report.samples) < sample_size:
        report.samples.append(entry)


def normalize_entry(entry: Any, index: int, report: NormalizationReport, sample_size: int = 0) -> Optional[NormalizedRecord]:
    """
    Normalize one raw entry, updating the report counters.

    Args:
        entry: Raw entry from the source document
        index: 0-based position of the entry in the document
        report: Report to update
        sample_size: How many rejected entries to keep in report.samples

    Returns:
        NormalizedRecord, or None if the entry was dropped
    """
    if not isinstance(entry, Mapping):
        if index < VERBOSE_REJECTION_LIMIT:
            logger.debug(f"Entry {index} is not an object: {entry!r}")
        report.rejected_not_object += 1
        _reject(report, entry, sample_size)
        return None

    surname = first_text(entry, SURNAME_KEYS) or None
    given_name = first_text(entry, GIVEN_NAME_KEYS) or None

    home_address = first_text(entry, HOME_ADDRESS_KEYS)
    institution_address = first_text(entry, INSTITUTION_ADDRESS_KEYS)
    city = first_text(entry, CITY_KEYS)
    postal_code = first_text(entry, POSTAL_CODE_KEYS)

    record_id = build_record_id(given_name, surname, index)

    if not home_address and not institution_address and not city:
        if index < VERBOSE_REJECTION_LIMIT:
            logger.debug(f"Entry {index} ({record_id}) has no address information")
        report.rejected_no_identity += 1
        _reject(report, entry, sample_size)
        return None

    home_location = extract_home_location(entry)
    institution_location = extract_institution_location(entry)

    if home_location is None and institution_location is None:
        if index < VERBOSE_REJECTION_LIMIT:
            logger.debug(f"Entry {index} ({record_id}) has no valid coordinates, keys: {list(entry.keys())}")
        report.rejected_no_location += 1
        _reject(report, entry, sample_size)
        return None

    report.accepted += 1
    return NormalizedRecord(
        id=record_id,
        home_address=home_address,
        institution_address=institution_address,
        city=city,
        postal_code=postal_code,
        home_location=home_location,
        institution_location=institution_location,
        surname=surname,
        given_name=given_name,
    )


def normalize_document(raw_document: Any, sample_size: Optional[int] = None) -> NormalizationResult:
    """
    Normalize a decoded source document.

    Args:
        raw_document: Decoded document, expected to be a list of objects
        sample_size: Rejected entries to keep for diagnostics
            (defaults to settings.pipeline.rejected_sample_size)

    Returns:
        NormalizationResult with the kept records and the report

    Raises:
        DocumentStructureError: If the document is not a list
    """
    if not isinstance(raw_document, (list, tuple)):
        raise DocumentStructureError(
            f"Document must be a list of objects, got {type(raw_document).__name__}"
        )

    if sample_size is None:
        sample_size = settings.pipeline.rejected_sample_size

    report = NormalizationReport()
    records: list[NormalizedRecord] = []

    for index, entry in enumerate(raw_document):
        report.seen += 1
        try:
            record = normalize_entry(entry, index, report, sample_size)
        except Exception as e:
            logger.error(f"Failed to normalize entry {index}: {e}")
            report.failed += 1
            report.errors.append(f"entry {index}: {e}")
            _reject(report, entry, sample_size)
            continue

        if record:
            records.append(record)

    logger.info(
        f"Normalization complete: {report.accepted} valid, {report.rejected} invalid "
        f"(no object: {report.rejected_not_object}, no address: {report.rejected_no_identity}, "
        f"no coordinates: {report.rejected_no_location}, failed: {report.failed})"
    )
    if report.seen and not records:
        logger.warning("No valid records found after normalization")

    return NormalizationResult(records=records, report=report)


def normalize(raw_document: Any) -> list[NormalizedRecord]:
    """Normalize a decoded document and return only the records."""
    return normalize_document(raw_document).records
