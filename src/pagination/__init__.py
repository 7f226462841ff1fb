"""Cursor pagination for result lists."""

from src.pagination.controller import FetchMode, ResultPaginationController, ViewState
from src.pagination.cursor import cursor_for_record, decode_cursor, encode_cursor
from src.pagination.notifications import LoggingNotifier, Notifier, RecordingNotifier
from src.pagination.page import Page, PageFetcher

__all__ = [
    "FetchMode",
    "ResultPaginationController",
    "ViewState",
    "cursor_for_record",
    "decode_cursor",
    "encode_cursor",
    "LoggingNotifier",
    "Notifier",
    "RecordingNotifier",
    "Page",
    "PageFetcher",
]
