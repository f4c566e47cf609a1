"""テスト用のインメモリObjectStore"""
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from s3_bucket_tools.models.storage import ListPage


@dataclass
class MockObjectStore:
    """呼び出しを記録するインメモリのObjectStore"""

    fail_parts: Set[int] = field(default_factory=set)
    fail_create: bool = False
    fail_complete: bool = False
    fail_abort: bool = False
    remaining_after_abort: List[int] = field(default_factory=list)
    pages: Dict[Any, List[ListPage]] = field(default_factory=dict)
    fail_page: Optional[int] = None
    objects: Dict[Tuple[str, str], int] = field(default_factory=dict)

    calls: List[Tuple[str, Any]] = field(default_factory=list)
    copied_parts: List[Tuple[int, str]] = field(default_factory=list)
    page_requests: List[Tuple[Any, Dict[str, Any], Any]] = field(default_factory=list)
    deleted: List[Dict[str, Any]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def _record(self, name: str, payload: Any = None):
        with self._lock:
            self.calls.append((name, payload))

    def create_multipart_session(self, destination, extra_args=None):
        self._record("create", (destination, extra_args))
        if self.fail_create:
            raise RuntimeError("AccessDenied")
        return "upload-1"

    def copy_part(self, session_id, part_number, source, destination, byte_range):
        self._record("copy_part", (part_number, byte_range))
        if part_number in self.fail_parts:
            raise RuntimeError(f"InternalError on part {part_number}")
        with self._lock:
            self.copied_parts.append((part_number, byte_range.range_header))
        return f'"etag-{part_number}"'

    def complete_session(self, session_id, destination, parts):
        self._record("complete", parts)
        if self.fail_complete:
            raise RuntimeError("InvalidPart")
        return {"Location": destination.url, "ETag": '"final-etag"'}

    def abort_session(self, session_id, destination):
        self._record("abort", session_id)
        if self.fail_abort:
            raise RuntimeError("ServiceUnavailable")

    def list_remaining_parts(self, session_id, destination):
        self._record("list_parts", session_id)
        return list(self.remaining_after_abort)

    def list_page(self, kind, params, cursor):
        index = sum(1 for request in self.page_requests if request[0] is kind)
        self.page_requests.append((kind, dict(params), cursor))
        if self.fail_page is not None and index == self.fail_page:
            raise RuntimeError("SlowDown")
        return self.pages[kind][index]

    def head_object(self, location):
        self._record("head", location)
        return {"ContentLength": self.objects[(location.bucket, location.key)]}

    def copy_object(self, source, destination, extra_args=None):
        self._record("copy_object", (source, destination, extra_args))
        return {"CopyObjectResult": {"ETag": '"copied"'}}

    def upload_file(self, file_path, destination, extra_args=None, transfer_config=None):
        self._record("upload", (file_path, destination, extra_args))

    def generate_upload_url(self, destination, params=None, expires_in=60):
        self._record("presign", (destination, params, expires_in))
        return f"https://mock-s3/{destination.bucket}/{destination.key}?expires={expires_in}"

    def list_buckets(self):
        return {"Buckets": [{"Name": "test-bucket"}]}

    def delete_objects(self, bucket, objects):
        self._record("delete", (bucket, objects))
        self.deleted.extend(objects)
        return {"Deleted": list(objects), "Errors": []}
