"""
Pydantic models for filecourier.

Values that flow through the dispatch path, plus the response envelopes of
the workspace API.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


# =====================================================
# Dispatch Models
# =====================================================

class WatchConfig(BaseModel):
    """Process-wide settings the dispatch loop needs, fixed at startup."""
    model_config = ConfigDict(frozen=True)

    watch_root: Path
    ignore_hidden: bool = True


class RelativeLocation(BaseModel):
    """Where a file sits below the watched root."""
    model_config = ConfigDict(frozen=True)

    context: str  # "" for files directly under the root
    name: str


class UploadRequest(BaseModel):
    """One file to deliver."""
    model_config = ConfigDict(frozen=True)

    context: str
    name: str
    path: Path


# =====================================================
# Workspace API Models
# =====================================================

class Envelope(BaseModel):
    """
    Generic response wrapper of the workspace API.

    Either `{"ok": true, ...payload}` or `{"ok": false, "error": "..."}`.
    """
    model_config = ConfigDict(extra="allow")

    ok: bool

    def payload(self) -> Dict[str, Any]:
        """Return the fields that sit beside `ok`, untouched."""
        return dict(self.model_extra or {})

    def error_message(self) -> str:
        """Service error code of an `ok: false` response."""
        error = self.payload().get("error")
        if isinstance(error, str) and error:
            return error
        return "unknown_error"


class UploadTarget(BaseModel):
    """Payload of files.getUploadURLExternal."""
    upload_url: str
    file_id: str


class CompletedFile(BaseModel):
    id: str
    title: Optional[str] = None


class CompletedUpload(BaseModel):
    """Payload of files.completeUploadExternal."""
    files: List[CompletedFile] = []


class PostedMessage(BaseModel):
    """Payload of chat.postMessage."""
    channel: str
    ts: str
