"""S3転送設定管理"""
from boto3.s3.transfer import TransferConfig as BotoTransferConfig
from ..models.config import UploadOptions


class TransferConfigManager:
    """単一アップロード用のTransferConfigを作成"""

    @staticmethod
    def create_config(options: UploadOptions) -> BotoTransferConfig:
        return BotoTransferConfig(
            multipart_threshold=options.multipart_threshold,
            max_concurrency=options.max_concurrency,
            multipart_chunksize=options.multipart_chunksize,
            use_threads=options.use_threads,
        )
