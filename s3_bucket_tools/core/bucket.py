"""バケット単位の操作"""
import os
import threading
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import InvalidInputError
from ..models.config import BucketConfig, Config
from ..models.storage import CopyResult, ListingKind, ObjectLocation
from ..utils.logger import LoggerManager
from .copier import MultipartCopyExecutor
from .object_store import S3ObjectStore
from .paginator import PaginatedFetcher, split_versions
from .partitioner import plan_partitions
from .s3_client import S3ClientManager
from .transfer import TransferConfigManager


DELETE_BATCH_SIZE = 1000  # DeleteObjectsの上限


class S3Bucket:
    """1つのバケットに対するコピー・一覧・削除操作"""

    def __init__(self, config: Config, store=None):
        self.config = config
        self.logger = LoggerManager.get_logger()

        if store is None:
            client_manager = S3ClientManager(config.aws)
            store = S3ObjectStore(client_manager.get_client())
        self.store = store

        self.copier = MultipartCopyExecutor(store, config.copy)
        self.fetcher = PaginatedFetcher(store, config.listing.paging_delay)

    @property
    def name(self) -> str:
        return self.config.bucket.name

    def location(self, key: str, bucket: Optional[str] = None) -> ObjectLocation:
        if not isinstance(key, str) or not key:
            raise InvalidInputError("Key parameter was expected to be a non-empty string")
        return ObjectLocation(bucket or self.name, key)

    def _write_args(self, extra_args: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        args = {}
        if self.config.bucket.acl:
            args["ACL"] = self.config.bucket.acl
        args.update(extra_args or {})
        return args

    # 設定の差し替え（常に新しいインスタンスを返す）

    def with_credentials(
        self,
        access_key_id: str,
        secret_access_key: str,
        session_token: Optional[str] = None,
    ) -> 'S3Bucket':
        aws = self.config.aws.with_credentials(access_key_id, secret_access_key, session_token)
        return S3Bucket(replace(self.config, aws=aws))

    def with_region(self, region: str) -> 'S3Bucket':
        return S3Bucket(replace(self.config, aws=self.config.aws.with_region(region)))

    def with_bucket_name(self, name: str) -> 'S3Bucket':
        bucket = BucketConfig(name=name, acl=self.config.bucket.acl)
        return S3Bucket(replace(self.config, bucket=bucket), store=self.store)

    # コピー

    def get_object_size(self, key: str, bucket: Optional[str] = None) -> int:
        response = self.store.head_object(self.location(key, bucket))
        return response["ContentLength"]

    def copy_file(
        self,
        source_key: str,
        destination_key: str,
        source_bucket: Optional[str] = None,
        destination_bucket: Optional[str] = None,
        extra_args: Optional[Dict[str, Any]] = None,
    ) -> CopyResult:
        """単一リクエストでコピー"""
        source = self.location(source_key, source_bucket)
        destination = self.location(destination_key, destination_bucket)
        response = self.store.copy_object(source, destination, self._write_args(extra_args))
        self.logger.info(f"Successfully copied {source} to {destination}")
        return CopyResult(location=destination, url=destination.url, response=response)

    def copy_file_multipart(
        self,
        source_key: str,
        destination_key: str,
        source_size: Optional[int] = None,
        source_bucket: Optional[str] = None,
        destination_bucket: Optional[str] = None,
        extra_args: Optional[Dict[str, Any]] = None,
        part_size: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CopyResult:
        """パートに分割してサーバーサイドでコピー"""
        source = self.location(source_key, source_bucket)
        destination = self.location(destination_key, destination_bucket)
        if source_size is None:
            source_size = self.get_object_size(source_key, source_bucket)

        return self.copier.copy(
            source,
            destination,
            source_size,
            extra_args=self._write_args(extra_args),
            part_size=part_size,
            max_concurrency=max_concurrency,
            cancel_event=cancel_event,
        )

    def copy_file_auto(
        self,
        source_key: str,
        destination_key: str,
        source_bucket: Optional[str] = None,
        destination_bucket: Optional[str] = None,
        extra_args: Optional[Dict[str, Any]] = None,
    ) -> CopyResult:
        """サイズに応じて単一コピーかマルチパートコピーを選ぶ"""
        size = self.get_object_size(source_key, source_bucket)
        options = self.config.copy
        if not plan_partitions(size, options.part_size, options.min_trailing_size):
            self.logger.info(
                f"{source_key} is {size} bytes; using single-call copy"
            )
            return self.copy_file(
                source_key, destination_key, source_bucket, destination_bucket, extra_args
            )
        return self.copy_file_multipart(
            source_key,
            destination_key,
            source_size=size,
            source_bucket=source_bucket,
            destination_bucket=destination_bucket,
            extra_args=extra_args,
        )

    # 一覧

    def iter_files(
        self,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        delay: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Iterator[Dict[str, Any]]:
        return self.fetcher.iter_items(
            ListingKind.OBJECTS,
            self._listing_params(prefix),
            limit=limit if limit is not None else self.config.listing.page_size,
            delay=delay,
            cancel_event=cancel_event,
        )

    def list_files(
        self,
        prefix: Optional[str] = None,
        limit: Optional[int] = None,
        delay: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """バケット内の全オブジェクトを取得"""
        return list(self.iter_files(prefix, limit=limit, delay=delay))

    def list_file_versions(
        self,
        key: Optional[str] = None,
        limit: Optional[int] = None,
        delay: Optional[float] = None,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """全バージョンと削除マーカーを取得（keyはPrefixとして扱う）"""
        entries = self.fetcher.fetch_all(
            ListingKind.OBJECT_VERSIONS,
            self._listing_params(key),
            limit=limit if limit is not None else self.config.listing.page_size,
            delay=delay,
        )
        return split_versions(entries)

    def _listing_params(self, prefix: Optional[str]) -> Dict[str, Any]:
        params = {"Bucket": self.name}
        if prefix is not None:
            if not isinstance(prefix, str) or prefix == "":
                raise InvalidInputError("Key parameter was expected to be a non-empty string")
            params["Prefix"] = prefix
        return params

    # 削除

    def delete_files(self, keys: List[str]) -> Dict[str, Any]:
        if not isinstance(keys, (list, tuple)) or not keys:
            raise InvalidInputError("Files list should not be empty")
        objects = []
        for key in keys:
            if not isinstance(key, str):
                raise InvalidInputError("File name Key should be string")
            objects.append({"Key": key})
        return self._delete_objects(objects)

    def delete_files_versioned(self, files: List[Dict[str, str]]) -> Dict[str, Any]:
        if not isinstance(files, (list, tuple)) or not files:
            raise InvalidInputError("Files list should not be empty")
        objects = []
        for file in files:
            if not isinstance(file.get("Key"), str):
                raise InvalidInputError("File name Key should be string")
            if file.get("VersionId") is None:
                raise InvalidInputError("File VersionId should be provided")
            objects.append({"Key": file["Key"], "VersionId": file["VersionId"]})
        return self._delete_objects(objects)

    def _delete_objects(self, objects: List[Dict[str, str]]) -> Dict[str, Any]:
        result: Dict[str, List[Any]] = {"Deleted": [], "Errors": []}
        for start in range(0, len(objects), DELETE_BATCH_SIZE):
            response = self.store.delete_objects(self.name, objects[start:start + DELETE_BATCH_SIZE])
            result["Deleted"].extend(response.get("Deleted", []))
            result["Errors"].extend(response.get("Errors", []))

        if result["Errors"]:
            self.logger.warning(f"Failed to delete {len(result['Errors'])} objects from {self.name}")
        self.logger.info(f"Deleted {len(result['Deleted'])} objects from {self.name}")
        return result

    def delete_all_versions(
        self,
        key: str,
        delete_versions: bool = True,
        delete_markers: bool = False,
    ) -> Dict[str, Any]:
        """キーの全バージョン（と削除マーカー）を削除"""
        listing = self.list_file_versions(key)
        files = []
        if delete_versions:
            files.extend(listing["Versions"])
        if delete_markers:
            files.extend(listing["DeleteMarkers"])

        # Prefix一致で取れた別キーは除外
        files = [
            {"Key": file["Key"], "VersionId": file["VersionId"]}
            for file in files
            if file.get("Key") == key
        ]
        if not files:
            return {"Deleted": [], "Errors": []}
        return self.delete_files_versioned(files)

    def delete_all_markers(self, key: str) -> Dict[str, Any]:
        return self.delete_all_versions(key, delete_versions=False, delete_markers=True)

    def delete_all_versions_and_markers(self, key: str) -> Dict[str, Any]:
        return self.delete_all_versions(key, delete_versions=True, delete_markers=True)

    # その他

    def upload_file(
        self,
        file_path: str,
        key: str,
        extra_args: Optional[Dict[str, Any]] = None,
    ) -> str:
        """ローカルファイルをアップロードしてURLを返す"""
        if not os.path.isfile(file_path):
            raise InvalidInputError(f"Not a file: {file_path}")
        destination = self.location(key)
        transfer_config = TransferConfigManager.create_config(self.config.upload)
        self.store.upload_file(file_path, destination, self._write_args(extra_args), transfer_config)
        self.logger.info(f"Successfully uploaded {file_path} to {destination}")
        return destination.url

    def get_upload_url(self, key: str, content_type: str, expires_in: int = 60) -> str:
        """PUT用の署名付きURL"""
        if not content_type:
            raise InvalidInputError("ContentType is required for an upload URL")
        params = self._write_args({"ContentType": content_type})
        return self.store.generate_upload_url(self.location(key), params, expires_in)

    def get_all_buckets(self) -> Dict[str, Any]:
        return self.store.list_buckets()
