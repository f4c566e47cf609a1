"""S3 Bucket Tools パッケージ"""
from typing import Tuple
from .models.config import Config
from .utils.logger import LoggerManager
from .core.bucket import S3Bucket
from .core.task_runner import TaskRunner


class S3BucketTools:
    """設定ファイルからコピータスクを実行するメインクラス"""

    def __init__(self, config_path: str = "config.json"):
        self.config = Config.from_file(config_path)

        self.logger = LoggerManager.setup(self.config.logging)
        self.logger.info("S3 Bucket Tools initialized")

        self.task_runner = TaskRunner(self.config)

    def run(self) -> Tuple[int, int]:
        """コピータスクを実行"""
        self.logger.info("Starting S3 copy process...")
        return self.task_runner.run_all_tasks()


__all__ = ['S3BucketTools', 'S3Bucket', 'Config']
