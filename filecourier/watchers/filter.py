"""
Event filter.

A file is only safe to read once the process writing it has closed it, so
the single completion signal is a close event on a file that was open for
writing. Create and modify events fire mid-write and are ignored.
"""

from typing import Union

from watchdog.events import EVENT_TYPE_CLOSED, FileSystemEvent

from filecourier.errors import SourceError

RawItem = Union[FileSystemEvent, BaseException]


def is_eligible(item: RawItem) -> bool:
    """
    Check whether a raw item from the watch source is a finished write.

    Args:
        item: Event or failure yielded by the watch source

    Returns:
        True for a close-after-write on a regular file, False otherwise

    Raises:
        SourceError: the watch source reported a failure instead of an event
    """
    if isinstance(item, SourceError):
        raise item
    if isinstance(item, BaseException):
        raise SourceError(f"error in event: {item}") from item

    # closed_no_write is a separate event type and fails this check
    return item.event_type == EVENT_TYPE_CLOSED and not item.is_directory
