"""Exception types shared across the package."""


class PhotoLocatorError(Exception):
    pass


class ConfigError(PhotoLocatorError):
    """Startup configuration is unusable (e.g. no API key)."""


class DecodeError(PhotoLocatorError):
    """The byte stream is not a parseable image/metadata container."""


class NoMetadataError(DecodeError):
    """The image opened fine but carries no EXIF block."""


class GeocodeTransportError(PhotoLocatorError):
    """The places request failed before a status could be read."""

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause
