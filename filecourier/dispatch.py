"""
Dispatch loop.

Pulls raw events from the watch source one at a time and turns finished
writes into uploads. A failure is contained to the event that caused it.
"""

import os
from typing import Iterable, Optional

from loguru import logger

from filecourier.errors import (
    CourierError,
    FatalConfigError,
    PathResolutionError,
    SourceError,
    UploadError,
)
from filecourier.models.schemas import UploadRequest, WatchConfig
from filecourier.uploaders.base import Uploader
from filecourier.utils.helpers import format_bytes, is_hidden_name
from filecourier.utils.paths import resolve
from filecourier.watchers.filter import RawItem, is_eligible


class Dispatcher:
    """Routes eligible filesystem events to an uploader."""

    def __init__(self, config: WatchConfig, uploader: Uploader):
        self.config = config
        self.uploader = uploader

    def handle(self, item: RawItem) -> Optional[UploadRequest]:
        """
        Process one raw item from the watch source.

        Returns:
            The request that was uploaded, or None if the item was skipped

        Raises:
            SourceError, PathResolutionError, UploadError
        """
        if not is_eligible(item):
            return None

        location = resolve(item.src_path, self.config.watch_root)
        # resolve() has already rejected paths that are not valid utf-8
        full_path = os.fsdecode(item.src_path)

        logger.debug(
            f"{location.name} was written, parent folder is '{location.context}'"
        )

        if self.config.ignore_hidden and is_hidden_name(location.name):
            logger.debug(f"{location.name} is a dotfile, ignoring")
            return None

        request = UploadRequest(
            context=location.context,
            name=location.name,
            path=full_path,
        )

        self.uploader.upload(request.context, request.name, request.path)

        return request

    def run(self, source: Iterable[RawItem]) -> int:
        """
        Consume ``source`` until it ends.

        Returns:
            Number of files uploaded
        """
        uploaded = 0

        for item in source:
            try:
                request = self.handle(item)
            except FatalConfigError:
                raise
            except SourceError as e:
                logger.error(f"Error while handling event: {e}")
                continue
            except PathResolutionError as e:
                logger.error(f"Skipping {e.path!r}: {e}")
                continue
            except UploadError as e:
                logger.error(f"Could not upload file '{item.src_path}': {e}")
                continue
            except CourierError as e:
                logger.error(f"Error while handling event: {e}")
                continue

            if request is not None:
                uploaded += 1
                logger.success(f"Uploaded {request.path} ({self._size(request)})")

        return uploaded

    @staticmethod
    def _size(request: UploadRequest) -> str:
        try:
            return format_bytes(request.path.stat().st_size)
        except OSError:
            return "size unknown"
