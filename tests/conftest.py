import io

import piexif
import pytest
from PIL import Image


def _dms(value):
    value = abs(value)
    deg = int(value)
    minutes = int(round((value - deg) * 60 * 100))
    return ((deg, 1), (minutes, 100), (0, 1))


def build_exif(model=None, focal=None, taken=None, gps=None, datetime_tag=None):
    exif = {"0th": {}, "Exif": {}, "GPS": {}}
    if model is not None:
        exif["0th"][piexif.ImageIFD.Model] = model.encode("ascii")
    if datetime_tag is not None:
        exif["0th"][piexif.ImageIFD.DateTime] = datetime_tag.encode("ascii")
    if focal is not None:
        exif["Exif"][piexif.ExifIFD.FocalLength] = focal
    if taken is not None:
        exif["Exif"][piexif.ExifIFD.DateTimeOriginal] = taken.encode("ascii")
    if gps is not None:
        lat, lon = gps
        exif["GPS"][piexif.GPSIFD.GPSLatitudeRef] = b"S" if lat < 0 else b"N"
        exif["GPS"][piexif.GPSIFD.GPSLatitude] = _dms(lat)
        exif["GPS"][piexif.GPSIFD.GPSLongitudeRef] = b"W" if lon < 0 else b"E"
        exif["GPS"][piexif.GPSIFD.GPSLongitude] = _dms(lon)
    return piexif.dump(exif)


def jpeg_bytes(**tags):
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (200, 120, 40)).save(buf, format="JPEG", exif=build_exif(**tags))
    return buf.getvalue()


def png_bytes():
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_jpeg():
    def _make(path, **tags):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(jpeg_bytes(**tags))
        return path
    return _make


@pytest.fixture
def make_png():
    def _make(path):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(png_bytes())
        return path
    return _make


class FakeResponse:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        import requests
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    """Stands in for requests.Session; records every GET."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_session():
    def _make(payload=None, **kwargs):
        return FakeSession(FakeResponse(payload, **kwargs))
    return _make
