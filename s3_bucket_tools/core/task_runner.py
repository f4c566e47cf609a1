"""コピータスクの実行"""
from typing import Optional, Tuple

from ..exceptions import S3BucketToolsError
from ..models.config import Config, CopyTask
from ..utils.logger import LoggerManager
from .bucket import S3Bucket


class TaskRunner:
    """設定ファイルのコピータスクを実行"""

    def __init__(self, config: Config, bucket: Optional[S3Bucket] = None):
        self.config = config
        self.logger = LoggerManager.get_logger()
        self.bucket = bucket or S3Bucket(config)

    def run_all_tasks(self) -> Tuple[int, int]:
        """全てのタスクを実行"""
        total_tasks = len(self.config.copy_tasks)
        successful_tasks = 0
        failed_tasks = 0

        self.logger.info(f"Starting copy tasks: {total_tasks} tasks to process")

        for i, task in enumerate(self.config.copy_tasks, 1):
            if not task.enabled:
                self.logger.info(f"Skipping disabled task: {task.name}")
                continue

            self.logger.info(f"Task {i}/{total_tasks}: Starting '{task.name}'")

            try:
                self._run_single_task(task)
                successful_tasks += 1
                self.logger.info(f"Task {i}/{total_tasks}: '{task.name}' completed successfully")
            except S3BucketToolsError as e:
                failed_tasks += 1
                self.logger.error(f"Task {i}/{total_tasks}: '{task.name}' failed: {e}")
            except Exception as e:
                failed_tasks += 1
                self.logger.error(f"Task {i}/{total_tasks}: '{task.name}' failed with error: {e}")

        self.logger.info(
            f"Copy tasks completed: {successful_tasks} successful, {failed_tasks} failed"
        )
        return successful_tasks, failed_tasks

    def _run_single_task(self, task: CopyTask):
        """単一タスクを実行"""
        result = self.bucket.copy_file_auto(
            task.source_key,
            task.destination_key,
            source_bucket=task.source_bucket,
            destination_bucket=task.destination_bucket,
        )
        self.logger.info(f"'{task.name}' copied to {result.url}")
        return result
