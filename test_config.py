#!/usr/bin/env python3
"""設定クラスのテスト"""
import json

import pytest

from s3_bucket_tools.exceptions import ConfigError
from s3_bucket_tools.models.config import (
    AWSConfig,
    Config,
    CopyOptions,
    ListingOptions,
    MIN_COPY_PART_SIZE,
)


def _write(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_config_loading(tmp_path):
    """config.jsonが読み込めるか確認"""
    path = _write(tmp_path, {
        "logging": {"level": "DEBUG"},
        "aws": {"region": "ap-northeast-1", "profile": "dev"},
        "bucket": {"name": "my-bucket"},
        "copy": {"part_size": 100 * 1024 * 1024, "max_concurrency": None},
        "listing": {"paging_delay": 1},
        "copy_tasks": [
            {"name": "t1", "source_key": "a", "destination_key": "b"},
            {"name": "t2", "source_key": "c", "destination_key": "d", "enabled": False},
        ],
    })

    config = Config.from_file(path)

    assert config.logging.level == "DEBUG"
    assert config.aws.region == "ap-northeast-1"
    assert config.bucket.name == "my-bucket"
    assert config.bucket.acl == "private"
    assert config.copy.part_size == 100 * 1024 * 1024
    assert config.copy.max_concurrency is None
    assert config.copy.min_trailing_size == MIN_COPY_PART_SIZE
    assert config.listing.paging_delay == 1
    assert [task.name for task in config.copy_tasks] == ["t1", "t2"]
    assert config.copy_tasks[1].enabled is False


def test_defaults(tmp_path):
    config = Config.from_file(_write(tmp_path, {
        "aws": {"region": "us-east-1"},
        "bucket": {"name": "my-bucket"},
    }))

    assert config.copy.part_size == 500_000_000
    assert config.listing.paging_delay == 0.5
    assert config.copy_tasks == []


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        Config.from_file("does-not-exist.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError):
        Config.from_file(str(path))


def test_missing_bucket_section(tmp_path):
    with pytest.raises(ConfigError):
        Config.from_file(_write(tmp_path, {"aws": {"region": "us-east-1"}}))


def test_unknown_option_rejected(tmp_path):
    with pytest.raises(ConfigError):
        Config.from_file(_write(tmp_path, {
            "aws": {"region": "us-east-1"},
            "bucket": {"name": "my-bucket"},
            "copy": {"chunk": 1},
        }))


def test_access_key_requires_secret():
    with pytest.raises(ValueError):
        AWSConfig(region="us-east-1", access_key_id="AKIA")


@pytest.mark.parametrize("kwargs", [
    {"part_size": 1024},
    {"max_concurrency": 0},
    {"min_trailing_size": -1},
])
def test_invalid_copy_options(kwargs):
    with pytest.raises(ValueError):
        CopyOptions(**kwargs)


@pytest.mark.parametrize("delay", [-0.1, float("nan"), "0.5", True])
def test_invalid_paging_delay(delay):
    with pytest.raises(ValueError):
        ListingOptions(paging_delay=delay)
