"""
Uploaders

One capability, two destinations:
- webhook.py - single multipart POST to a webhook URL
- workspace.py - token authenticated three-step upload handshake

The destination is chosen once at startup with build_uploader().
"""

from typing import Union

from filecourier.uploaders.base import Uploader
from filecourier.uploaders.webhook import WebhookUploader
from filecourier.uploaders.workspace import WorkspaceUploader
from filecourier.utils.config import Settings

AnyUploader = Union[WebhookUploader, WorkspaceUploader]


def build_uploader(settings: Settings) -> AnyUploader:
    """
    Create the uploader selected by ``settings``.

    Raises:
        FatalConfigError: destination or credentials missing or invalid
    """
    kind = settings.get_uploader_kind()

    if kind == "webhook":
        return WebhookUploader(settings.get_webhook_url(), timeout=settings.http_timeout)

    return WorkspaceUploader(
        settings.workspace_token,
        default_channel=settings.workspace_channel,
        channel_map=settings.get_channel_map(),
        base_url=settings.get_workspace_api_url(),
        timeout=settings.http_timeout,
    )


__all__ = [
    "AnyUploader",
    "Uploader",
    "WebhookUploader",
    "WorkspaceUploader",
    "build_uploader",
]
