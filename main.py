#!/usr/bin/env python3
"""S3 Bucket Tools - エントリーポイント"""
import sys

from s3_bucket_tools import S3BucketTools


def main():
    """メイン関数"""
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"
    try:
        tools = S3BucketTools(config_path)
        successful, failed = tools.run()

        exit_code = 0 if failed == 0 else 1
        sys.exit(exit_code)

    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
