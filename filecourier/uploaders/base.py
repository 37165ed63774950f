"""
Uploader capability shared by every destination.
"""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import httpx

from filecourier.errors import HttpStatusError, TransportError


@runtime_checkable
class Uploader(Protocol):
    """Delivers a local file, tagged with its context, to a remote service."""

    def upload(self, context: str, name: str, path: Path) -> None:
        """
        Upload one file.

        Args:
            context: Folder below the watched root ("" for the root itself)
            name: File name
            path: Absolute path of the file to read

        Raises:
            UploadError: the file could not be delivered
        """
        ...


def send(client: httpx.Client, method: str, url: str, **kwargs: Any) -> httpx.Response:
    """
    Build and send a request, mapping httpx failures onto upload errors.

    Extra keyword arguments go to ``client.build_request``.

    Raises:
        TransportError: the URL is unusable or no response was received
        HttpStatusError: the response status is not 2xx
    """
    try:
        request = client.build_request(method, url, **kwargs)
        response = client.send(request)
    except httpx.InvalidURL as e:
        raise TransportError(f"{method} {url!r} is not a valid URL: {e}") from e
    except httpx.HTTPError as e:
        raise TransportError(f"{method} {url} failed: {e}") from e

    if not response.is_success:
        raise HttpStatusError(response.status_code, str(url))

    return response
