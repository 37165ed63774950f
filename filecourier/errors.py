"""
Error taxonomy for filecourier.

Everything raised while handling a single filesystem event derives from
CourierError and is contained by the dispatch loop. FatalConfigError is the
only one that stops the process, and only before the loop starts.
"""

from pathlib import PurePath
from typing import Optional, Union

PathLike = Union[str, bytes, PurePath]


class CourierError(Exception):
    """Base class for all filecourier errors."""


class FatalConfigError(CourierError):
    """Startup configuration is missing or invalid."""


class SourceError(CourierError):
    """The watch mechanism reported a failure instead of an event."""


# =====================================================
# Path resolution
# =====================================================

class PathResolutionError(CourierError):
    """A changed path could not be turned into a context and a name."""

    reason = "cannot resolve path"

    def __init__(self, path: PathLike, detail: Optional[str] = None):
        self.path = path
        self.detail = detail
        message = f"{self.reason}: {path!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class PathOutsideRoot(PathResolutionError):
    reason = "path is outside the watched root"


class NoParent(PathResolutionError):
    reason = "path has no segments below the watched root"


class NoFilename(PathResolutionError):
    reason = "path has no filename"


class InvalidEncoding(PathResolutionError):
    reason = "path is not valid utf-8"


# =====================================================
# Uploads
# =====================================================

class UploadError(CourierError):
    """Delivering a file to the remote service failed."""


class TransportError(UploadError):
    """The HTTP request never produced a response."""


class HttpStatusError(UploadError):
    """The remote answered with a non-success HTTP status."""

    def __init__(self, status_code: int, url: str):
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code} from {url}")


class ServiceRejectedError(UploadError):
    """The remote API answered with an `ok: false` envelope."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"service error: {message}")


class PartialCompletionError(UploadError):
    """
    File bytes were transferred but the upload was never finalized.

    Remote state is inconsistent: the file exists on the service side but is
    not attached to any channel.
    """

    def __init__(self, file_id: str, message: str):
        self.file_id = file_id
        self.message = message
        super().__init__(
            f"file {file_id} was uploaded but could not be finalized: {message}"
        )
