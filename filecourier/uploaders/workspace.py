"""
Workspace API uploader.

Token authenticated upload through the external upload handshake:

1. files.getUploadURLExternal - reserve an upload URL and a file id
2. POST the file bytes to that URL
3. files.completeUploadExternal - attach the file id to a channel

Every API call answers with the `{ok, error?, ...}` envelope.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from filecourier.errors import (
    PartialCompletionError,
    ServiceRejectedError,
    UploadError,
)
from filecourier.models.schemas import (
    CompletedUpload,
    Envelope,
    PostedMessage,
    UploadTarget,
)
from filecourier.uploaders.base import send

DEFAULT_BASE_URL = "https://slack.com/api"

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def decode_envelope(response: httpx.Response, payload_model: Type[PayloadT]) -> PayloadT:
    """
    Decode an API response into its payload model.

    Only `ok` is decoded up front. `error` is read as the service message
    when `ok` is false; on a success it is left to the payload model, so a
    payload carrying an `error` field of any shape is still a success.

    Raises:
        ServiceRejectedError: `ok` is false, or the body is not a valid envelope
    """
    try:
        envelope = Envelope.model_validate_json(response.content)
    except ValidationError as e:
        raise ServiceRejectedError(f"malformed response: {e}") from e

    if not envelope.ok:
        raise ServiceRejectedError(envelope.error_message())

    try:
        return payload_model.model_validate(envelope.payload())
    except ValidationError as e:
        raise ServiceRejectedError(f"unexpected payload: {e}") from e


class WorkspaceUploader:
    """Uploads files to a workspace chat API with a bearer token."""

    def __init__(
        self,
        token: str,
        default_channel: Optional[str] = None,
        channel_map: Optional[Mapping[str, str]] = None,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize workspace uploader.

        Args:
            token: Bearer token
            default_channel: Channel for contexts missing from channel_map
            channel_map: Context to channel id routing table
            base_url: API base URL
            client: HTTP client to reuse, created if omitted
            timeout: Per-request timeout when creating the client
        """
        self.token = token
        self.default_channel = default_channel
        self.channel_map = dict(channel_map or {})
        self.base_url = base_url.rstrip("/")
        self.client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    def channel_for(self, context: str) -> str:
        """
        Pick the channel a file in ``context`` is attached to.

        Lookup order: channel_map, default_channel, the context itself.

        Raises:
            UploadError: nothing to route to
        """
        channel = self.channel_map.get(context) or self.default_channel or context
        if not channel:
            raise UploadError(f"no channel configured for context {context!r}")
        return channel

    def _call(
        self,
        method: str,
        payload_model: Type[PayloadT],
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> PayloadT:
        response = send(
            self.client,
            "POST",
            f"{self.base_url}/{method}",
            headers=self.headers,
            json=json,
            data=data,
        )
        return decode_envelope(response, payload_model)

    def post_message(self, channel: str, text: str) -> PostedMessage:
        """Post a plain text message to ``channel``."""
        return self._call(
            "chat.postMessage",
            PostedMessage,
            json={"channel": channel, "text": text},
        )

    def upload(self, context: str, name: str, path: Path) -> None:
        channel = self.channel_for(context)

        try:
            length = Path(path).stat().st_size
        except OSError as e:
            raise UploadError(f"cannot get file length of {path}: {e}") from e

        target = self._call(
            "files.getUploadURLExternal",
            UploadTarget,
            data={"filename": name, "length": length},
        )
        logger.debug(f"Reserved upload {target.file_id} for {name}")

        try:
            with open(path, "rb") as fh:
                send(
                    self.client,
                    "POST",
                    target.upload_url,
                    headers=self.headers,
                    files={"file": (name, fh)},
                )
        except OSError as e:
            raise UploadError(f"cannot read {path}: {e}") from e

        try:
            self._call(
                "files.completeUploadExternal",
                CompletedUpload,
                json={
                    "channel_id": channel,
                    "files": [{"id": target.file_id, "title": name}],
                },
            )
        except ServiceRejectedError as e:
            raise PartialCompletionError(target.file_id, e.message) from e
        except UploadError as e:
            raise PartialCompletionError(target.file_id, str(e)) from e

        logger.debug(f"Upload {target.file_id} attached to channel {channel}")

    def close(self) -> None:
        self.client.close()
