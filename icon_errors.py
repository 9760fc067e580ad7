# icon_errors.py
"""
Error kinds raised by the icon pipeline.

Every export failure is an IconError so the GUI and CLI can catch a
single type at their boundary and show the message.
"""


class IconError(Exception):
    pass


class DecodeError(IconError):
    """Source image is missing, unreadable or not a known image format."""


class EncodeError(IconError):
    """PNG codec failed to serialize a buffer."""


class WriteError(IconError):
    """Destination file could not be written."""


class NoSourceImage(IconError):
    def __init__(self, message="No source image loaded."):
        super().__init__(message)


class InvalidDimensions(IconError, ValueError):
    """Target size text is non-numeric or not positive."""


class InvalidSize(IconError, ValueError):
    """Resample target width/height is not positive."""


class InvalidRadius(IconError, ValueError):
    pass


class IndexOutOfRange(IconError, IndexError):
    pass
