"""コピー進捗管理"""
import time
import threading


class CopyProgressTracker:
    """マルチパートコピーの進捗をパート単位で追跡"""

    def __init__(self, total_size: int, total_parts: int, name: str):
        self.total_size = total_size
        self.total_parts = total_parts
        self.name = name
        self.copied_size = 0
        self.copied_parts = 0
        self.lock = threading.Lock()
        self.start_time = time.time()

    def __call__(self, bytes_copied: int):
        """パート完了ごとに呼ばれる"""
        with self.lock:
            self.copied_size += bytes_copied
            self.copied_parts += 1
            self._display_progress()

    def _display_progress(self):
        if self.total_size == 0:
            return

        progress = (self.copied_size / self.total_size) * 100
        elapsed_time = time.time() - self.start_time

        speed = self.copied_size / elapsed_time / 1024 / 1024 if elapsed_time > 0 else 0  # MB/s
        print(f"\r{self.name}: {progress:.1f}% "
              f"({self.copied_parts}/{self.total_parts} parts) "
              f"- {speed:.2f} MB/s", end="", flush=True)

    def complete(self):
        """コピー完了"""
        elapsed_time = time.time() - self.start_time
        speed = self.total_size / elapsed_time / 1024 / 1024 if elapsed_time > 0 else 0
        print(f"\r{self.name}: Complete! - {speed:.2f} MB/s - {elapsed_time:.1f}s")
