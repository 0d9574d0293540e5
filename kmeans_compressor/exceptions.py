"""
Error types raised by the compressor.
"""

from pathlib import Path
from typing import Optional, Union


class InvalidParameter(ValueError):
    """
    Raised when a clustering parameter or input array is unusable.

    Covers K < 1, K > number of pixels, negative iteration counts,
    centroid tables of the wrong length and arrays without exactly
    three channels. Always raised before any clustering work starts.
    """


class ImageIOError(OSError):
    """
    Raised by the image codec when a file cannot be read or written.

    Attributes:
        path: File that was being read or written
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        path: Union[str, Path],
        cause: Optional[BaseException] = None
    ):
        self.path = Path(path)
        self.cause = cause
        if cause is not None:
            message = f"{message}: {self.path} ({cause})"
        else:
            message = f"{message}: {self.path}"
        super().__init__(message)
