"""
Webhook uploader.

Delivers a file to a pre-provisioned webhook URL with a single multipart
POST. The secret lives in the URL, so there is no auth handshake.
"""

from pathlib import Path
from typing import Optional

import httpx
from loguru import logger

from filecourier.errors import UploadError
from filecourier.uploaders.base import send


def caption(context: str, name: str) -> str:
    """Human readable label for an uploaded file."""
    return f"{context}/{name}" if context else name


class WebhookUploader:
    """Uploads files to a chat webhook."""

    def __init__(
        self,
        url: str,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize webhook uploader.

        Args:
            url: Webhook URL, including its secret
            client: HTTP client to reuse, created if omitted
            timeout: Per-request timeout when creating the client
        """
        self.url = url
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    def upload(self, context: str, name: str, path: Path) -> None:
        try:
            with open(path, "rb") as fh:
                send(
                    self.client,
                    "POST",
                    self.url,
                    data={
                        "content": caption(context, name),
                        "context": context,
                        "name": name,
                    },
                    files={"file": (name, fh)},
                )
        except OSError as e:
            raise UploadError(f"cannot read {path}: {e}") from e

        logger.debug(f"Webhook accepted {caption(context, name)}")

    def close(self) -> None:
        self.client.close()
