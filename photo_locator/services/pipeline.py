"""Pipeline: discover -> extract -> resolve, one file at a time."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
import logging

from photo_locator.config import Config
from photo_locator.errors import DecodeError, GeocodeTransportError, NoMetadataError
from photo_locator.extractor import CaptureMetadata, read_metadata
from photo_locator.geocoder import GeocodeResult, GeocodeStatus, resolve
from photo_locator.scanner import discover, is_image
from photo_locator.utils.paths import resolve_root

Resolver = Callable[..., GeocodeResult]
ReportCallback = Callable[["FileReport"], None]


class FileOutcome(Enum):
    SKIPPED_NOT_IMAGE = "skipped_not_image"
    SKIPPED_UNREADABLE = "skipped_unreadable"
    SKIPPED_NO_METADATA = "skipped_no_metadata"
    SKIPPED_DECODE_ERROR = "skipped_decode_error"
    NO_LOCATION = "no_location"
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    TRANSPORT_ERROR = "transport_error"
    QUOTA_EXCEEDED = "quota_exceeded"


@dataclass(frozen=True)
class FileReport:
    path: Path
    outcome: FileOutcome
    metadata: Optional[CaptureMetadata] = None
    geocode: Optional[GeocodeResult] = None


@dataclass
class PipelineSummary:
    root: Path
    reports: List[FileReport] = field(default_factory=list)
    walk_errors: List[OSError] = field(default_factory=list)
    halted: bool = False

    @property
    def counts(self) -> Dict[FileOutcome, int]:
        return dict(Counter(r.outcome for r in self.reports))

    @property
    def processed(self) -> int:
        return sum(1 for r in self.reports if r.outcome is not FileOutcome.SKIPPED_NOT_IMAGE)


# level and message per non-resolved geocode status
_STATUS_LOG: Dict[GeocodeStatus, Tuple[int, str]] = {
    GeocodeStatus.NO_RESULTS: (logging.WARNING, "Location not found!"),
    GeocodeStatus.INVALID_REQUEST: (logging.WARNING, "Invalid request!"),
    GeocodeStatus.DENIED: (logging.ERROR, "Request denied!"),
    GeocodeStatus.UNKNOWN_ERROR: (logging.ERROR, "Unknown error!"),
    GeocodeStatus.QUOTA_EXCEEDED: (logging.ERROR, "Quota exceeded! Please wait several minutes..."),
}


def _log_metadata(logger: logging.Logger, meta: CaptureMetadata) -> None:
    logger.debug("Model: %s", meta.camera_model)
    focal = "%d/%d" % meta.focal_length if meta.focal_length else None
    logger.debug("Focal: %s", focal)
    logger.debug("Taken: %s", meta.taken_at)
    logger.debug("Latitude, Longitude: %s, %s", meta.latitude, meta.longitude)


def _locate(path: Path, meta: CaptureMetadata, config: Config, logger: logging.Logger, resolver: Resolver) -> FileReport:
    coordinate = meta.coordinate
    if coordinate is None:
        logger.warning("Can't get location! (%s)", path)
        return FileReport(path, FileOutcome.NO_LOCATION, metadata=meta)

    try:
        result = resolver(
            coordinate,
            config.api_key,
            timeout=config.timeout,
            endpoint=config.endpoint,
            radius=config.radius,
        )
    except GeocodeTransportError as e:
        logger.error("Geocoding failed for %s: %s", path, e)
        return FileReport(path, FileOutcome.TRANSPORT_ERROR, metadata=meta)

    if result.status is GeocodeStatus.RESOLVED:
        logger.info("Location: %s", result.name)
        return FileReport(path, FileOutcome.RESOLVED, metadata=meta, geocode=result)

    level, message = _STATUS_LOG[result.status]
    logger.debug("Places response: %r", result.raw_status)
    logger.log(level, "%s (%s)", message, path)
    if result.status is GeocodeStatus.QUOTA_EXCEEDED:
        return FileReport(path, FileOutcome.QUOTA_EXCEEDED, metadata=meta, geocode=result)
    return FileReport(path, FileOutcome.UNRESOLVED, metadata=meta, geocode=result)


def process_file(path: Path, config: Config, logger: logging.Logger, resolver: Resolver = resolve) -> FileReport:
    """Run one discovered path through classification, extraction and resolution."""
    if not is_image(path):
        logger.debug("Skipping non-image: %s", path)
        return FileReport(path, FileOutcome.SKIPPED_NOT_IMAGE)

    logger.info("File: %s", path)
    try:
        meta = read_metadata(path)
    except NoMetadataError as e:
        logger.warning("No metadata in %s: %s", path, e)
        return FileReport(path, FileOutcome.SKIPPED_NO_METADATA)
    except DecodeError as e:
        logger.error("Cannot decode %s: %s", path, e)
        return FileReport(path, FileOutcome.SKIPPED_DECODE_ERROR)
    except OSError as e:
        logger.error("Cannot read %s: %s", path, e)
        return FileReport(path, FileOutcome.SKIPPED_UNREADABLE)

    _log_metadata(logger, meta)
    return _locate(path, meta, config, logger, resolver)


def run_pipeline(
    config: Config,
    logger: Optional[logging.Logger] = None,
    resolver: Resolver = resolve,
    on_report: Optional[ReportCallback] = None,
) -> PipelineSummary:
    """Walk `config.directory` and process every file in turn.

    Stops before pulling the next path once the places service reports quota
    exhaustion; `summary.halted` is then True.
    """
    logger = logger or logging.getLogger(__name__)
    root = resolve_root(config.directory)
    summary = PipelineSummary(root=root)

    def on_walk_error(err: OSError) -> None:
        logger.error("Skipping unreadable entry %s: %s", err.filename, err.strerror or err)
        summary.walk_errors.append(err)

    for path in discover(root, on_error=on_walk_error):
        report = process_file(path, config, logger, resolver)
        summary.reports.append(report)
        if on_report:
            on_report(report)
        if report.outcome is FileOutcome.QUOTA_EXCEEDED:
            summary.halted = True
            break

    counts = summary.counts
    logger.info(
        "Done: %d image(s) processed, %d resolved, %d without location%s",
        summary.processed,
        counts.get(FileOutcome.RESOLVED, 0),
        counts.get(FileOutcome.NO_LOCATION, 0),
        " (halted on quota)" if summary.halted else "",
    )
    return summary
