"""S3 Bucket Tools コアモジュール"""
from .s3_client import S3ClientManager
from .object_store import ObjectStore, S3ObjectStore
from .partitioner import plan_partitions
from .copier import MultipartCopyExecutor
from .paginator import PaginatedFetcher, split_versions
from .bucket import S3Bucket
from .task_runner import TaskRunner

__all__ = [
    'S3ClientManager',
    'ObjectStore',
    'S3ObjectStore',
    'plan_partitions',
    'MultipartCopyExecutor',
    'PaginatedFetcher',
    'split_versions',
    'S3Bucket',
    'TaskRunner'
]
