"""例外クラス"""
from typing import List, Optional


class S3BucketToolsError(Exception):
    """s3_bucket_tools の基底例外"""
    pass


class ConfigError(S3BucketToolsError):
    """設定ファイルの読み込みに失敗"""
    pass


class InvalidInputError(S3BucketToolsError, ValueError):
    """呼び出し側のパラメータが不正（リモート呼び出し前に検出）"""
    pass


class SessionCreateFailedError(S3BucketToolsError):
    """マルチパートセッションの作成に失敗"""

    def __init__(self, destination, cause: Exception):
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to create multipart session for {destination}: {cause}")


class PartCopyFailedError(S3BucketToolsError):
    """パートコピーに失敗"""

    def __init__(self, session_id: str, partition, cause: Exception):
        self.session_id = session_id
        self.partition = partition
        self.cause = cause
        super().__init__(
            f"Part {partition.part_number} ({partition.range_header}) of session "
            f"{session_id} failed: {cause}"
        )


class CopyCancelledError(S3BucketToolsError):
    """パートの開始前にコピーがキャンセルされた"""
    pass


class CompletionFailedError(S3BucketToolsError):
    """全パート成功後の完了処理に失敗（セッションは中止しない）"""

    def __init__(self, session_id: str, parts: List[dict], cause: Exception):
        self.session_id = session_id
        self.parts = parts
        self.cause = cause
        super().__init__(
            f"Failed to complete multipart session {session_id} "
            f"({len(parts)} parts copied): {cause}"
        )


class MultipartCopyAbortedError(S3BucketToolsError):
    """パート失敗によりコピーを中止した（クリーンアップは確認済み）"""

    def __init__(self, session_id: str, part_error: PartCopyFailedError):
        self.session_id = session_id
        self.part_error = part_error
        super().__init__(f"Multipart copy aborted (session {session_id}): {part_error}")


class AbortIncompleteError(S3BucketToolsError):
    """中止後もパートが残っている、または中止処理自体が失敗した"""

    def __init__(
        self,
        session_id: str,
        remaining_parts: Optional[List[int]],
        part_error: PartCopyFailedError,
        cleanup_error: Optional[Exception] = None,
    ):
        self.session_id = session_id
        self.remaining_parts = remaining_parts
        self.part_error = part_error
        self.cleanup_error = cleanup_error
        if cleanup_error is not None:
            detail = f"cleanup failed: {cleanup_error}"
        else:
            detail = f"parts still present: {remaining_parts}"
        super().__init__(
            f"Abort procedure for session {session_id} did not remove copied parts ({detail})"
        )


class ListingError(S3BucketToolsError):
    """ページ取得に失敗（途中までの結果は破棄される）"""

    def __init__(self, kind, cursor, message: str):
        self.kind = kind
        self.cursor = cursor
        super().__init__(f"Listing {kind.value} failed at cursor {cursor!r}: {message}")


class ListingCancelledError(S3BucketToolsError):
    """ページ取得ループがキャンセルされた"""
    pass
