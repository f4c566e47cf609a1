"""S3Bucketのテスト"""
import pytest

from mock_store import MockObjectStore
from s3_bucket_tools.core.bucket import S3Bucket
from s3_bucket_tools.exceptions import InvalidInputError
from s3_bucket_tools.models.config import (
    AWSConfig,
    BucketConfig,
    Config,
    CopyOptions,
    ListingOptions,
    LoggingConfig,
)
from s3_bucket_tools.models.storage import (
    ListingKind,
    ListPage,
    ObjectLocation,
    VersionCursor,
    VersionEntry,
)


@pytest.fixture()
def config():
    return Config(
        logging=LoggingConfig(),
        aws=AWSConfig(region="us-east-1"),
        bucket=BucketConfig(name="test-bucket", acl="private"),
        copy=CopyOptions(max_concurrency=2),
        listing=ListingOptions(paging_delay=0),
    )


@pytest.fixture()
def store():
    return MockObjectStore(objects={
        ("test-bucket", "small.txt"): 1024,
        ("test-bucket", "large.bin"): 1_050_000_000,
    })


@pytest.fixture()
def bucket(config, store):
    return S3Bucket(config, store=store)


def test_copy_file_auto_uses_single_copy_for_small_objects(bucket, store):
    result = bucket.copy_file_auto("small.txt", "copy/small.txt")

    assert result.location == ObjectLocation("test-bucket", "copy/small.txt")
    assert store.count("copy_object") == 1
    assert store.count("create") == 0


def test_copy_file_auto_uses_multipart_for_large_objects(bucket, store):
    result = bucket.copy_file_auto("large.bin", "copy/large.bin", destination_bucket="other-bucket")

    assert result.url == "https://other-bucket.s3.amazonaws.com/copy/large.bin"
    assert store.count("copy_object") == 0
    assert store.count("copy_part") == 3
    assert store.calls[1] == (
        "create", (ObjectLocation("other-bucket", "copy/large.bin"), {"ACL": "private"})
    )


def test_copy_file_multipart_reads_size_when_missing(bucket, store):
    bucket.copy_file_multipart("large.bin", "copy/large.bin")

    assert store.count("head") == 1
    assert store.count("complete") == 1


def test_copy_file_passes_acl(bucket, store):
    bucket.copy_file("small.txt", "copy/small.txt", extra_args={"ContentType": "text/plain"})

    _, (_, _, extra_args) = store.calls[0]
    assert extra_args == {"ACL": "private", "ContentType": "text/plain"}


def test_empty_key_rejected(bucket):
    with pytest.raises(InvalidInputError):
        bucket.copy_file("", "dst")


def test_list_files_with_prefix(bucket, store):
    store.pages[ListingKind.OBJECTS] = [
        ListPage(items=[{"Key": "logs/a"}], is_truncated=False),
    ]

    files = bucket.list_files(prefix="logs/", limit=100)

    assert files == [{"Key": "logs/a"}]
    assert store.page_requests[0][1] == {"Bucket": "test-bucket", "Prefix": "logs/", "MaxKeys": 100}


def test_list_files_rejects_empty_prefix(bucket):
    with pytest.raises(InvalidInputError):
        bucket.list_files(prefix="")


def _version_pages():
    return [
        ListPage(
            items=[
                VersionEntry({"Key": "doc.txt", "VersionId": "v3"}),
                VersionEntry({"Key": "doc.txt.bak", "VersionId": "b1"}),
            ],
            is_truncated=True,
            next_cursor=VersionCursor("doc.txt.bak", "b1"),
        ),
        ListPage(
            items=[
                VersionEntry({"Key": "doc.txt", "VersionId": "v2"}),
                VersionEntry({"Key": "doc.txt", "VersionId": "m1"}, is_delete_marker=True),
            ],
            is_truncated=False,
        ),
    ]


def test_list_file_versions(bucket, store):
    store.pages[ListingKind.OBJECT_VERSIONS] = _version_pages()

    listing = bucket.list_file_versions("doc.txt")

    assert [v["VersionId"] for v in listing["Versions"]] == ["v3", "b1", "v2"]
    assert [m["VersionId"] for m in listing["DeleteMarkers"]] == ["m1"]
    assert store.page_requests[0][1] == {"Bucket": "test-bucket", "Prefix": "doc.txt"}


def test_delete_all_versions_only_targets_exact_key(bucket, store):
    store.pages[ListingKind.OBJECT_VERSIONS] = _version_pages()

    result = bucket.delete_all_versions("doc.txt")

    assert store.deleted == [
        {"Key": "doc.txt", "VersionId": "v3"},
        {"Key": "doc.txt", "VersionId": "v2"},
    ]
    assert len(result["Deleted"]) == 2


def test_delete_all_versions_and_markers(bucket, store):
    store.pages[ListingKind.OBJECT_VERSIONS] = _version_pages()

    bucket.delete_all_versions_and_markers("doc.txt")

    assert [file["VersionId"] for file in store.deleted] == ["v3", "v2", "m1"]


def test_delete_all_markers_with_nothing_to_delete(bucket, store):
    store.pages[ListingKind.OBJECT_VERSIONS] = [
        ListPage(items=[VersionEntry({"Key": "doc.txt", "VersionId": "v1"})], is_truncated=False)
    ]

    assert bucket.delete_all_markers("doc.txt") == {"Deleted": [], "Errors": []}
    assert store.count("delete") == 0


def test_delete_files_in_batches(bucket, store):
    keys = [f"file-{index}" for index in range(2500)]

    result = bucket.delete_files(keys)

    batches = [payload for name, payload in store.calls if name == "delete"]
    assert [len(objects) for _, objects in batches] == [1000, 1000, 500]
    assert len(result["Deleted"]) == 2500


@pytest.mark.parametrize("keys", [[], "file", [1, 2]])
def test_delete_files_validates_input(bucket, keys):
    with pytest.raises(InvalidInputError):
        bucket.delete_files(keys)


def test_delete_files_versioned_requires_version_id(bucket):
    with pytest.raises(InvalidInputError):
        bucket.delete_files_versioned([{"Key": "a"}])


def test_upload_file(bucket, store, tmp_path):
    path = tmp_path / "hello.txt"
    path.write_text("hello")

    url = bucket.upload_file(str(path), "uploads/hello.txt")

    assert url == "https://test-bucket.s3.amazonaws.com/uploads/hello.txt"
    assert store.calls[0][1][2] == {"ACL": "private"}


def test_upload_missing_file_rejected(bucket, tmp_path):
    with pytest.raises(InvalidInputError):
        bucket.upload_file(str(tmp_path / "missing.txt"), "uploads/missing.txt")


def test_get_upload_url(bucket, store):
    url = bucket.get_upload_url("uploads/a.png", "image/png")

    assert url.startswith("https://mock-s3/test-bucket/uploads/a.png")
    _, (_, params, expires_in) = store.calls[0]
    assert params == {"ACL": "private", "ContentType": "image/png"}
    assert expires_in == 60


def test_with_bucket_name_returns_new_instance(bucket, store):
    other = bucket.with_bucket_name("other-bucket")

    assert other is not bucket
    assert other.name == "other-bucket"
    assert bucket.name == "test-bucket"
    assert other.store is store


def test_aws_config_updates_are_copies():
    original = AWSConfig(region="us-east-1", profile="dev")

    updated = original.with_credentials("AKIA", "secret").with_region("eu-west-1")

    assert original.region == "us-east-1"
    assert original.access_key_id is None
    assert updated.region == "eu-west-1"
    assert updated.access_key_id == "AKIA"
    assert updated.profile is None
