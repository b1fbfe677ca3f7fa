"""Extractor: read capture metadata (camera, focal length, time, GPS) from image streams.

Pillow identifies the container, piexif decodes the EXIF block and exifread is
used as a second reader when piexif rejects the block. Every facet is optional:
a missing or malformed tag leaves the field as None, it never raises.
"""
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import exifread
import piexif
from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, NoMetadataError

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

Rational = Tuple[int, int]


@dataclass(frozen=True)
class CaptureMetadata:
    camera_model: Optional[str] = None
    focal_length: Optional[Rational] = None
    taken_at: Optional[datetime] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def coordinate(self) -> Optional[Tuple[float, float]]:
        """(lat, lon), or None when either axis is missing or zero.

        (0, 0) is treated as "no GPS fix" even though it is a real point.
        """
        if not self.latitude or not self.longitude:
            return None
        return self.latitude, self.longitude

    @property
    def has_location(self) -> bool:
        return self.coordinate is not None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    value = str(value).replace("\x00", "").strip()
    return value or None


def _rational(value) -> Optional[Rational]:
    # piexif gives (num, den) or ((num, den), ...); exifread gives [Ratio, ...]
    if isinstance(value, (list, tuple)) and value and not isinstance(value[0], int):
        value = value[0]
    # exifread 3 Ratio is a Fraction, so 500/10 already arrives as 50/1; only the
    # piexif path keeps the numerator and denominator as written
    if hasattr(value, "num") and hasattr(value, "den"):
        value = (value.num, value.den)
    elif hasattr(value, "numerator") and not isinstance(value, int):
        value = (value.numerator, value.denominator)
    try:
        num, den = int(value[0]), int(value[1])
    except (TypeError, ValueError, IndexError):
        return None
    if den == 0:
        return None
    return num, den


def _dms_to_decimal(dms, ref) -> Optional[float]:
    # dms is three rationals: degrees, minutes, seconds
    try:
        parts = [_rational(p) for p in list(dms)[:3]]
    except TypeError:
        return None
    if len(parts) != 3 or None in parts:
        return None
    deg, minute, sec = (num / den for num, den in parts)
    dec = deg + (minute / 60.0) + (sec / 3600.0)
    ref = _text(ref)
    if ref and ref.upper()[0] in ("S", "W"):
        dec = -dec
    return dec


def _parse_datetime(value) -> Optional[datetime]:
    value = _text(value)
    if not value:
        return None
    try:
        return datetime.strptime(value, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def _piexif_tags(exif_bytes: bytes) -> Dict[str, Any]:
    """Flatten piexif's IFD dicts into {tag name: raw value}."""
    exif = piexif.load(exif_bytes)
    tags: Dict[str, Any] = {}
    for ifd in ("0th", "Exif", "GPS"):
        for tag_id, value in (exif.get(ifd) or {}).items():
            info = piexif.TAGS[ifd].get(tag_id)
            if info:
                tags.setdefault(info["name"], value)
    return tags


def _exifread_tags(stream) -> Dict[str, Any]:
    """Read tags with exifread, keyed the same way as `_piexif_tags`."""
    stream.seek(0)
    raw = exifread.process_file(stream, details=False)
    tags: Dict[str, Any] = {}
    for key, tag in raw.items():
        group, _, name = key.partition(" ")
        if group not in ("Image", "EXIF", "GPS") or not name:
            continue
        values = getattr(tag, "values", tag)
        if isinstance(values, str):
            tags.setdefault(name, values)
        else:
            tags.setdefault(name, list(values))
    return tags


def decode_tags(stream) -> Dict[str, Any]:
    """Decode the EXIF block of an image stream into a tag-name map.

    Raises DecodeError if the stream is not an image Pillow can identify, and
    NoMetadataError if it is an image without any EXIF block.
    """
    try:
        with Image.open(stream) as img:
            exif_bytes = img.info.get("exif")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(f"not a readable image: {e}") from e

    if not exif_bytes:
        raise NoMetadataError("no EXIF data")

    try:
        return _piexif_tags(exif_bytes)
    except Exception as e:
        # piexif is strict about malformed IFDs; exifread is more forgiving
        try:
            tags = _exifread_tags(stream)
        except Exception as inner:
            raise DecodeError(f"EXIF block could not be decoded: {inner}") from inner
        if not tags:
            raise DecodeError(f"EXIF block could not be decoded: {e}") from e
        return tags


def extract_metadata(stream) -> CaptureMetadata:
    """Return the capture metadata found in a binary image stream.

    Only a stream that cannot be decoded at all raises (DecodeError); absent
    facets are simply left as None.
    """
    tags = decode_tags(stream)

    lat = lon = None
    if "GPSLatitude" in tags and "GPSLongitude" in tags:
        lat = _dms_to_decimal(tags["GPSLatitude"], tags.get("GPSLatitudeRef"))
        lon = _dms_to_decimal(tags["GPSLongitude"], tags.get("GPSLongitudeRef"))
        if lat is None or lon is None:
            lat = lon = None

    taken_at = _parse_datetime(tags.get("DateTimeOriginal")) or _parse_datetime(tags.get("DateTime"))

    return CaptureMetadata(
        camera_model=_text(tags.get("Model")),
        focal_length=_rational(tags.get("FocalLength")),
        taken_at=taken_at,
        latitude=lat,
        longitude=lon,
    )


def read_metadata(path) -> CaptureMetadata:
    """Open `path` and extract its metadata. OSError from opening propagates."""
    with open(Path(path), "rb") as fh:
        return extract_metadata(fh)


if __name__ == "__main__":
    import sys
    p = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(".")
    if p.is_file():
        print(read_metadata(p))
    else:
        print("Provide a path to an image file to test")
