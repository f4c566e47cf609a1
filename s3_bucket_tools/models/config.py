"""設定管理用のデータクラス"""
from dataclasses import dataclass, field, replace
from typing import List, Optional
import json
import math
import os

from ..exceptions import ConfigError


DEFAULT_COPY_PART_SIZE = 500_000_000  # 500MB
MIN_COPY_PART_SIZE = 5 * 1024 * 1024  # S3の最小チャンクサイズ (5MB)
DEFAULT_PAGING_DELAY = 0.5  # 秒


@dataclass
class LoggingConfig:
    """ロギング設定"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    file: Optional[str] = None


@dataclass(frozen=True)
class AWSConfig:
    """AWS関連の設定（変更時は新しいインスタンスを作る）"""
    region: str
    profile: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    endpoint_url: Optional[str] = None

    def __post_init__(self):
        if not self.region:
            raise ValueError("region cannot be empty")

        # アクセスキーとシークレットはセットで指定
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise ValueError(
                "access_key_id and secret_access_key must be given together"
            )

        if self.session_token and not self.access_key_id:
            raise ValueError("session_token requires access_key_id and secret_access_key")

    def with_credentials(
        self,
        access_key_id: str,
        secret_access_key: str,
        session_token: Optional[str] = None,
    ) -> 'AWSConfig':
        """認証情報を差し替えた設定を返す"""
        return replace(
            self,
            profile=None,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            session_token=session_token,
        )

    def with_region(self, region: str) -> 'AWSConfig':
        """リージョンを差し替えた設定を返す"""
        return replace(self, region=region)


@dataclass(frozen=True)
class BucketConfig:
    """対象バケットの設定"""
    name: str
    acl: Optional[str] = "private"

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("bucket name cannot be empty")


@dataclass
class CopyOptions:
    """マルチパートコピーのオプション"""
    part_size: int = DEFAULT_COPY_PART_SIZE
    min_trailing_size: int = MIN_COPY_PART_SIZE
    max_concurrency: Optional[int] = 10  # Noneの場合はパート数だけ並列
    enable_progress: bool = False

    def __post_init__(self):
        if self.part_size < MIN_COPY_PART_SIZE:
            raise ValueError(
                f"Invalid part_size: {self.part_size}. "
                f"Must be at least {MIN_COPY_PART_SIZE} bytes"
            )
        if self.min_trailing_size < 0:
            raise ValueError(f"Invalid min_trailing_size: {self.min_trailing_size}")
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValueError(
                f"Invalid max_concurrency: {self.max_concurrency}. Must be >= 1 or null"
            )


@dataclass
class ListingOptions:
    """一覧取得のオプション"""
    paging_delay: float = DEFAULT_PAGING_DELAY
    page_size: Optional[int] = None

    def __post_init__(self):
        if (
            isinstance(self.paging_delay, bool)
            or not isinstance(self.paging_delay, (int, float))
            or not math.isfinite(self.paging_delay)
            or self.paging_delay < 0
        ):
            raise ValueError(
                f"Invalid paging_delay: {self.paging_delay}. Must be a non-negative number"
            )
        if self.page_size is not None and self.page_size < 1:
            raise ValueError(f"Invalid page_size: {self.page_size}")


@dataclass
class UploadOptions:
    """単一アップロード用の転送オプション"""
    multipart_threshold: int = 100 * 1024 * 1024  # 100MB
    max_concurrency: int = 4
    multipart_chunksize: int = 10 * 1024 * 1024  # 10MB
    use_threads: bool = True


@dataclass
class CopyTask:
    """個別のコピータスク"""
    name: str
    source_key: str
    destination_key: str

    description: Optional[str] = None
    enabled: bool = True
    source_bucket: Optional[str] = None  # 省略時は設定のバケット
    destination_bucket: Optional[str] = None


@dataclass
class Config:
    """メイン設定クラス"""
    logging: LoggingConfig
    aws: AWSConfig
    bucket: BucketConfig
    copy: CopyOptions = field(default_factory=CopyOptions)
    listing: ListingOptions = field(default_factory=ListingOptions)
    upload: UploadOptions = field(default_factory=UploadOptions)
    copy_tasks: List[CopyTask] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """辞書から設定を作成"""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            aws=AWSConfig(**data.get("aws", {})),
            bucket=BucketConfig(**data.get("bucket", {})),
            copy=CopyOptions(**data.get("copy", {})),
            listing=ListingOptions(**data.get("listing", {})),
            upload=UploadOptions(**data.get("upload", {})),
            copy_tasks=[CopyTask(**task) for task in data.get("copy_tasks", [])],
        )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """設定ファイルから読み込み"""
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file {config_path} not found.")

        try:
            with open(config_path, "r", encoding="utf-8") as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Error decoding JSON from {config_path}: {e}") from e

        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Error loading configuration: {e}") from e
