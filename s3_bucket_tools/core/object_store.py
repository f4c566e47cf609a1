"""オブジェクトストアのインターフェースとboto3実装"""
from typing import Any, Dict, List, Optional, Protocol

from botocore.exceptions import ClientError

from ..exceptions import InvalidInputError
from ..models.storage import (
    ContinuationCursor,
    ListingKind,
    ListPage,
    ObjectLocation,
    PaginationCursor,
    PartitionRange,
    VersionCursor,
    VersionEntry,
)
from ..utils.logger import LoggerManager


class ObjectStore(Protocol):
    """マルチパートコピーとページ取得に必要なリモート操作"""

    def create_multipart_session(
        self, destination: ObjectLocation, extra_args: Optional[Dict[str, Any]] = None
    ) -> str: ...

    def copy_part(
        self,
        session_id: str,
        part_number: int,
        source: ObjectLocation,
        destination: ObjectLocation,
        byte_range: PartitionRange,
    ) -> str: ...

    def complete_session(
        self, session_id: str, destination: ObjectLocation, parts: List[Dict[str, Any]]
    ) -> Dict[str, Any]: ...

    def abort_session(self, session_id: str, destination: ObjectLocation) -> None: ...

    def list_remaining_parts(self, session_id: str, destination: ObjectLocation) -> List[int]: ...

    def list_page(
        self, kind: ListingKind, params: Dict[str, Any], cursor: Optional[PaginationCursor]
    ) -> ListPage: ...


def _is_no_such_upload(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") in ("NoSuchUpload", "404")


class S3ObjectStore:
    """boto3クライアントを使ったObjectStore実装"""

    def __init__(self, s3_client):
        self.s3_client = s3_client
        self.logger = LoggerManager.get_logger()

    # マルチパートコピー

    def create_multipart_session(self, destination, extra_args=None) -> str:
        response = self.s3_client.create_multipart_upload(
            Bucket=destination.bucket, Key=destination.key, **(extra_args or {})
        )
        return response["UploadId"]

    def copy_part(self, session_id, part_number, source, destination, byte_range) -> str:
        response = self.s3_client.upload_part_copy(
            Bucket=destination.bucket,
            Key=destination.key,
            CopySource=source.as_copy_source(),
            CopySourceRange=byte_range.range_header,
            PartNumber=part_number,
            UploadId=session_id,
        )
        return response["CopyPartResult"]["ETag"]

    def complete_session(self, session_id, destination, parts) -> Dict[str, Any]:
        return self.s3_client.complete_multipart_upload(
            Bucket=destination.bucket,
            Key=destination.key,
            UploadId=session_id,
            MultipartUpload={"Parts": parts},
        )

    def abort_session(self, session_id, destination) -> None:
        self.s3_client.abort_multipart_upload(
            Bucket=destination.bucket, Key=destination.key, UploadId=session_id
        )

    def list_remaining_parts(self, session_id, destination) -> List[int]:
        """セッションに残っているパート番号（アップロード自体が消えていれば空）"""
        part_numbers: List[int] = []
        params = {"Bucket": destination.bucket, "Key": destination.key, "UploadId": session_id}
        while True:
            try:
                response = self.s3_client.list_parts(**params)
            except ClientError as e:
                if _is_no_such_upload(e):
                    self.logger.debug(f"Upload {session_id} no longer exists")
                    return part_numbers
                raise
            part_numbers.extend(part["PartNumber"] for part in response.get("Parts", []))
            if not response.get("IsTruncated"):
                return part_numbers
            params["PartNumberMarker"] = response["NextPartNumberMarker"]

    # ページ取得

    def list_page(self, kind, params, cursor) -> ListPage:
        request = dict(params)
        if kind is ListingKind.OBJECTS:
            if cursor is not None:
                request["ContinuationToken"] = cursor.token
            response = self.s3_client.list_objects_v2(**request)
            next_cursor = None
            if response.get("IsTruncated"):
                token = response.get("NextContinuationToken")
                next_cursor = ContinuationCursor(token) if token else None
            return ListPage(
                items=list(response.get("Contents", [])),
                is_truncated=bool(response.get("IsTruncated")),
                next_cursor=next_cursor,
            )

        if kind is ListingKind.OBJECT_VERSIONS:
            if cursor is not None:
                # 前ページのマーカーは次のカーソルで置き換える
                request.pop("KeyMarker", None)
                request.pop("VersionIdMarker", None)
                request.update(_version_marker_params(cursor))
            validate_version_markers(request)
            response = self.s3_client.list_object_versions(**request)
            items = [VersionEntry(entry) for entry in response.get("Versions", [])]
            items.extend(
                VersionEntry(entry, is_delete_marker=True)
                for entry in response.get("DeleteMarkers", [])
            )
            next_cursor = None
            if response.get("IsTruncated") and response.get("NextKeyMarker"):
                next_cursor = VersionCursor(
                    key_marker=response["NextKeyMarker"],
                    version_id_marker=response.get("NextVersionIdMarker"),
                )
            return ListPage(
                items=items,
                is_truncated=bool(response.get("IsTruncated")),
                next_cursor=next_cursor,
            )

        raise InvalidInputError(f"Unknown listing kind: {kind!r}")

    # 単発の操作

    def head_object(self, location: ObjectLocation) -> Dict[str, Any]:
        return self.s3_client.head_object(Bucket=location.bucket, Key=location.key)

    def copy_object(self, source, destination, extra_args=None) -> Dict[str, Any]:
        return self.s3_client.copy_object(
            Bucket=destination.bucket,
            Key=destination.key,
            CopySource=source.as_copy_source(),
            **(extra_args or {}),
        )

    def upload_file(self, file_path: str, destination, extra_args=None, transfer_config=None):
        self.s3_client.upload_file(
            file_path,
            destination.bucket,
            destination.key,
            ExtraArgs=extra_args or None,
            Config=transfer_config,
        )

    def generate_upload_url(self, destination, params=None, expires_in: int = 60) -> str:
        request = {"Bucket": destination.bucket, "Key": destination.key}
        request.update(params or {})
        return self.s3_client.generate_presigned_url(
            "put_object", Params=request, ExpiresIn=expires_in
        )

    def list_buckets(self) -> Dict[str, Any]:
        return self.s3_client.list_buckets()

    def delete_objects(self, bucket: str, objects: List[Dict[str, str]]) -> Dict[str, Any]:
        return self.s3_client.delete_objects(Bucket=bucket, Delete={"Objects": objects})


def validate_version_markers(params: Dict[str, Any]) -> None:
    """バージョンIDマーカーはキーマーカーなしでは送れない"""
    if params.get("VersionIdMarker") and not params.get("KeyMarker"):
        raise InvalidInputError("A version-id marker cannot be specified without a key marker")


def _version_marker_params(cursor: VersionCursor) -> Dict[str, str]:
    if cursor.version_id_marker and not cursor.key_marker:
        raise InvalidInputError("A version-id marker cannot be specified without a key marker")
    params = {}
    if cursor.key_marker:
        params["KeyMarker"] = cursor.key_marker
    if cursor.version_id_marker:
        params["VersionIdMarker"] = cursor.version_id_marker
    return params
