"""カーソル形式のページ取得"""
import math
import threading
import time
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import InvalidInputError, ListingCancelledError, ListingError
from ..models.config import DEFAULT_PAGING_DELAY
from ..models.storage import ListingKind, ListPage, VersionEntry
from ..utils.logger import LoggerManager
from .object_store import ObjectStore, validate_version_markers


def validate_limit(limit) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidInputError("Number was expected for limit parameter")
    if limit < 1:
        raise InvalidInputError(f"Invalid limit: {limit}. Must be a positive integer")


def validate_delay(delay) -> None:
    if delay is None:
        return
    if isinstance(delay, bool) or not isinstance(delay, (int, float)):
        raise InvalidInputError("Number was expected for delay parameter")
    if not math.isfinite(delay) or delay < 0:
        raise InvalidInputError(f"Invalid delay: {delay}. Must be a non-negative number")


class PaginatedFetcher:
    """切り詰められていないページが返るまでカーソルを辿る

    ページの取得は常に逐次で、ページ間でpage_delay秒待つ。
    """

    def __init__(self, store: ObjectStore, page_delay: float = DEFAULT_PAGING_DELAY):
        validate_delay(page_delay)
        self.store = store
        self.page_delay = page_delay
        self.logger = LoggerManager.get_logger()

    def iter_pages(
        self,
        kind: ListingKind,
        params: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        delay: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[ListPage]:
        """ページを順に返すイテレータ（パラメータは呼び出し時に検証）"""
        validate_limit(limit)
        validate_delay(delay)

        request = dict(params or {})
        if kind is ListingKind.OBJECT_VERSIONS:
            validate_version_markers(request)
        if limit is not None:
            request["MaxKeys"] = limit
        page_delay = self.page_delay if delay is None else delay

        return self._iter_pages(kind, request, page_delay, cancel_event)

    def _iter_pages(self, kind, request, page_delay, cancel_event) -> Iterator[ListPage]:
        cursor = None
        page_count = 0
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise ListingCancelledError(
                    f"Listing {kind.value} cancelled after {page_count} pages"
                )

            try:
                page = self.store.list_page(kind, request, cursor)
            except Exception as e:
                self.logger.error(f"Listing {kind.value} failed at cursor {cursor!r}: {e}")
                raise ListingError(kind, cursor, str(e)) from e
            page_count += 1

            yield page

            if not page.is_truncated:
                self.logger.debug(f"Listing {kind.value} finished after {page_count} pages")
                return

            if page.next_cursor is None:
                raise ListingError(kind, cursor, "truncated page returned no next cursor")
            cursor = page.next_cursor

            # レート制限のためページ間で待つ
            if page_delay:
                time.sleep(page_delay)

    def iter_items(
        self,
        kind: ListingKind,
        params: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        delay: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[Any]:
        """全ページの要素を順に返すイテレータ"""
        pages = self.iter_pages(kind, params, limit=limit, delay=delay, cancel_event=cancel_event)
        return (item for page in pages for item in page.items)

    def fetch_all(
        self,
        kind: ListingKind,
        params: Optional[Dict[str, Any]] = None,
        limit: Optional[int] = None,
        delay: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[Any]:
        """全ページを取得して要素を連結（途中で失敗した場合は何も返さない）"""
        return list(
            self.iter_items(kind, params, limit=limit, delay=delay, cancel_event=cancel_event)
        )


def split_versions(entries: List[VersionEntry]) -> Dict[str, List[Dict[str, Any]]]:
    """バージョン一覧をVersionsとDeleteMarkersに分ける"""
    return {
        "Versions": [entry.entry for entry in entries if not entry.is_delete_marker],
        "DeleteMarkers": [entry.entry for entry in entries if entry.is_delete_marker],
    }
