"""Photo Locator package - scan photos, read EXIF capture data and look up where they were taken."""

from .scanner import discover, is_image, scan_images
from .extractor import CaptureMetadata, extract_metadata, read_metadata
from .geocoder import GeocodeResult, GeocodeStatus, resolve
from .config import Config
from .errors import ConfigError, DecodeError, GeocodeTransportError, NoMetadataError

__all__ = [
    "discover",
    "is_image",
    "scan_images",
    "CaptureMetadata",
    "extract_metadata",
    "read_metadata",
    "GeocodeResult",
    "GeocodeStatus",
    "resolve",
    "Config",
    "ConfigError",
    "DecodeError",
    "GeocodeTransportError",
    "NoMetadataError",
]
