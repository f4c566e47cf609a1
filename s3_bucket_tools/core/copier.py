"""マルチパートコピーの実行"""
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any, Dict, List, Optional

from ..exceptions import (
    AbortIncompleteError,
    CompletionFailedError,
    CopyCancelledError,
    InvalidInputError,
    MultipartCopyAbortedError,
    PartCopyFailedError,
    SessionCreateFailedError,
)
from ..models.config import MIN_COPY_PART_SIZE, CopyOptions
from ..models.storage import (
    CopyPartResult,
    CopyResult,
    MultipartCopySession,
    ObjectLocation,
    PartitionRange,
    SessionState,
)
from ..utils.logger import LoggerManager
from ..utils.progress import CopyProgressTracker
from .object_store import ObjectStore
from .partitioner import plan_partitions


class MultipartCopyExecutor:
    """サーバーサイドのマルチパートコピー

    作成 → パートの並列コピー → 完了、の順に進める。
    1つでもパートが失敗した場合はセッションを中止し、パートが
    残っていないことを確認してから元のエラーを報告する。
    """

    def __init__(self, store: ObjectStore, options: Optional[CopyOptions] = None):
        self.store = store
        self.options = options or CopyOptions()
        self.logger = LoggerManager.get_logger()

    def copy(
        self,
        source: ObjectLocation,
        destination: ObjectLocation,
        source_size: int,
        extra_args: Optional[Dict[str, Any]] = None,
        part_size: Optional[int] = None,
        min_trailing_size: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CopyResult:
        """sourceをdestinationへマルチパートでコピー"""
        if part_size is None:
            part_size = self.options.part_size
        # 型と負の値はplan_partitionsで検証
        if isinstance(part_size, int) and 0 < part_size < MIN_COPY_PART_SIZE:
            raise InvalidInputError(
                f"Invalid part_size: {part_size}. Must be at least {MIN_COPY_PART_SIZE} bytes"
            )

        partitions = plan_partitions(
            source_size,
            part_size,
            min_trailing_size if min_trailing_size is not None else self.options.min_trailing_size,
        )
        if not partitions:
            raise InvalidInputError(
                f"Object {source} ({source_size} bytes) is smaller than the minimum "
                "multipart chunk size; use a single-call copy instead"
            )

        workers = max_concurrency if max_concurrency is not None else self.options.max_concurrency
        if workers is not None and (
            isinstance(workers, bool) or not isinstance(workers, int) or workers < 1
        ):
            raise InvalidInputError(f"Invalid max_concurrency: {workers}")

        try:
            session_id = self.store.create_multipart_session(destination, extra_args)
        except Exception as e:
            self.logger.error(f"Failed to create multipart session for {destination}: {e}")
            raise SessionCreateFailedError(destination, e) from e

        session = MultipartCopySession(
            session_id=session_id,
            destination=destination,
            source=source,
            partitions=partitions,
        )
        self.logger.info(
            f"Started multipart copy {source} -> {destination} "
            f"({len(partitions)} parts, session {session_id})"
        )

        results, failures = self._copy_parts(session, workers, cancel_event, source_size)

        if failures:
            # パート番号が最も小さい失敗を代表として報告
            failures.sort(key=lambda error: error.partition.part_number)
            self._abort(session, failures[0])

        return self._complete(session, results)

    def _copy_parts(self, session, workers, cancel_event, source_size):
        """全パートを並列でコピーし、全ての結果が揃うまで待つ"""
        session.state = SessionState.PARTS_IN_FLIGHT
        partitions = session.partitions
        tracker = None
        if self.options.enable_progress:
            tracker = CopyProgressTracker(source_size, len(partitions), session.source.key)

        with ThreadPoolExecutor(max_workers=workers or len(partitions)) as pool:
            futures = [
                pool.submit(self._copy_part, session, partition, cancel_event, tracker)
                for partition in partitions
            ]
            # 最初の失敗で打ち切らず、全てのパートの完了を待つ
            wait(futures)

        results: List[CopyPartResult] = []
        failures: List[PartCopyFailedError] = []
        for future in futures:
            error = future.exception()
            if error is None:
                results.append(future.result())
            else:
                failures.append(error)

        if tracker and not failures:
            tracker.complete()
        return results, failures

    def _copy_part(
        self,
        session: MultipartCopySession,
        partition: PartitionRange,
        cancel_event: Optional[threading.Event],
        tracker: Optional[CopyProgressTracker],
    ) -> CopyPartResult:
        try:
            if cancel_event is not None and cancel_event.is_set():
                raise CopyCancelledError(
                    f"Copy cancelled before part {partition.part_number} started"
                )
            etag = self.store.copy_part(
                session.session_id,
                partition.part_number,
                session.source,
                session.destination,
                partition,
            )
        except Exception as e:
            self.logger.error(
                f"Part {partition.part_number} ({partition.range_header}) "
                f"of session {session.session_id} failed: {e}"
            )
            raise PartCopyFailedError(session.session_id, partition, e) from e

        if tracker:
            tracker(partition.size)
        return CopyPartResult(part_number=partition.part_number, etag=etag)

    def _complete(self, session: MultipartCopySession, results: List[CopyPartResult]) -> CopyResult:
        session.state = SessionState.COMPLETING
        parts = [
            result.to_completed_part()
            for result in sorted(results, key=lambda result: result.part_number)
        ]

        try:
            response = self.store.complete_session(session.session_id, session.destination, parts)
        except Exception as e:
            # 原因が不明なため中止はしない
            session.state = SessionState.COMPLETION_FAILED
            self.logger.error(
                f"Failed to complete multipart session {session.session_id}; "
                f"session left as-is: {e}"
            )
            raise CompletionFailedError(session.session_id, parts, e) from e

        session.state = SessionState.COMPLETED
        self.logger.info(
            f"Successfully copied {session.source} to {session.destination} "
            f"in {len(parts)} parts"
        )
        return CopyResult(
            location=session.destination,
            url=session.destination.url,
            response=response,
        )

    def _abort(self, session: MultipartCopySession, part_error: PartCopyFailedError):
        """セッションを中止し、パートが残っていないか確認（常に例外を送出）"""
        session.state = SessionState.ABORTING
        self.logger.warning(f"Aborting multipart session {session.session_id}")

        try:
            self.store.abort_session(session.session_id, session.destination)
            remaining = self.store.list_remaining_parts(session.session_id, session.destination)
        except Exception as e:
            session.state = SessionState.ABORT_FAILED
            self.logger.error(f"Abort procedure for session {session.session_id} failed: {e}")
            raise AbortIncompleteError(session.session_id, None, part_error, cleanup_error=e) from e

        if remaining:
            session.state = SessionState.ABORT_FAILED
            self.logger.error(
                f"Abort procedure passed but copy parts were not removed: {remaining}"
            )
            raise AbortIncompleteError(session.session_id, list(remaining), part_error) from part_error

        session.state = SessionState.ABORTED
        self.logger.info(f"Multipart session {session.session_id} aborted")
        raise MultipartCopyAbortedError(session.session_id, part_error) from part_error
