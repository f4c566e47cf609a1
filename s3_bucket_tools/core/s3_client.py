"""S3クライアント管理"""
import boto3
from botocore.exceptions import NoCredentialsError
from ..models.config import AWSConfig
from ..utils.logger import LoggerManager


class S3ClientManager:
    """S3クライアントの作成と管理

    AWSConfigは不変なので、認証情報やリージョンを変える場合は
    新しい設定で別のマネージャーを作る。
    """

    def __init__(self, aws_config: AWSConfig):
        self.aws_config = aws_config
        self.logger = LoggerManager.get_logger()
        self._client = None

    def get_client(self):
        """S3クライアントを取得（必要に応じて作成）"""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        """S3クライアントを作成"""
        config = self.aws_config
        try:
            if config.access_key_id:
                # 明示的な認証情報
                s3_client = boto3.client(
                    's3',
                    region_name=config.region,
                    endpoint_url=config.endpoint_url,
                    aws_access_key_id=config.access_key_id,
                    aws_secret_access_key=config.secret_access_key,
                    aws_session_token=config.session_token,
                )
                self.logger.info("S3 client created with explicit credentials.")
                return s3_client

            if config.profile:
                session = boto3.Session(profile_name=config.profile)
                s3_client = session.client(
                    's3', region_name=config.region, endpoint_url=config.endpoint_url
                )
            else:
                s3_client = boto3.client(
                    's3', region_name=config.region, endpoint_url=config.endpoint_url
                )

            self.logger.info("S3 client created with default credentials.")
            return s3_client

        except NoCredentialsError:
            self.logger.error("AWS credentials not available.")
            raise
        except Exception as e:
            self.logger.error(f"Error creating S3 client: {e}")
            raise
