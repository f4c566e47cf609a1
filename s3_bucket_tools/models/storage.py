"""ストレージ操作で使うデータクラス"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class ObjectLocation:
    """バケットとキーでオブジェクトを特定"""
    bucket: str
    key: str

    @property
    def url(self) -> str:
        return f"https://{self.bucket}.s3.amazonaws.com/{self.key}"

    def as_copy_source(self) -> Dict[str, str]:
        """boto3のCopySource形式"""
        return {"Bucket": self.bucket, "Key": self.key}

    def __str__(self) -> str:
        return f"{self.bucket}/{self.key}"


@dataclass(frozen=True)
class PartitionRange:
    """1パート分のバイト範囲（両端を含む）"""
    part_number: int
    start_offset: int
    end_offset: int

    @property
    def size(self) -> int:
        return self.end_offset - self.start_offset + 1

    @property
    def range_header(self) -> str:
        return f"bytes={self.start_offset}-{self.end_offset}"


@dataclass(frozen=True)
class CopyPartResult:
    """パートコピーの結果"""
    part_number: int
    etag: str

    def to_completed_part(self) -> Dict[str, Any]:
        return {"PartNumber": self.part_number, "ETag": self.etag}


class SessionState(Enum):
    """マルチパートコピーセッションの状態"""
    INITIATED = "initiated"
    PARTS_IN_FLIGHT = "parts_in_flight"
    COMPLETING = "completing"
    COMPLETED = "completed"
    COMPLETION_FAILED = "completion_failed"
    ABORTING = "aborting"
    ABORTED = "aborted"
    ABORT_FAILED = "abort_failed"


@dataclass
class MultipartCopySession:
    """進行中のマルチパートコピー"""
    session_id: str
    destination: ObjectLocation
    source: ObjectLocation
    state: SessionState = SessionState.INITIATED
    partitions: List[PartitionRange] = field(default_factory=list)


@dataclass(frozen=True)
class CopyResult:
    """コピー完了時の結果"""
    location: ObjectLocation
    url: str
    response: Dict[str, Any]


class ListingKind(Enum):
    """一覧取得の種類"""
    OBJECTS = "objects"
    OBJECT_VERSIONS = "object_versions"


@dataclass(frozen=True)
class ContinuationCursor:
    """オブジェクト一覧用の継続トークン"""
    token: str


@dataclass(frozen=True)
class VersionCursor:
    """バージョン一覧用のキーマーカーとバージョンIDマーカー"""
    key_marker: Optional[str]
    version_id_marker: Optional[str] = None


PaginationCursor = Union[ContinuationCursor, VersionCursor]


@dataclass(frozen=True)
class VersionEntry:
    """バージョン一覧の1件（バージョンまたは削除マーカー）"""
    entry: Dict[str, Any]
    is_delete_marker: bool = False


@dataclass
class ListPage:
    """一覧取得の1ページ"""
    items: List[Any]
    is_truncated: bool
    next_cursor: Optional[PaginationCursor] = None
