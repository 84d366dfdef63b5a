"""Test configuration and fixtures for s3-tools."""

from dataclasses import dataclass
from unittest.mock import Mock

import boto3
import pytest
from moto import mock_aws
from pydantic import BaseModel

from s3_tools import Client, new_client, new_options

TEST_BUCKET = "test-bucket"
TEST_OBJECT = "test-object"


class Item(BaseModel):
    """Model stored as ``{"name": ..., "amount": ...}``."""

    name: str
    amount: int


@dataclass
class Point:
    x: float
    y: float
    label: str = ""


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never looks for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test_key")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test_secret")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def s3(aws_credentials):
    """Raw boto3 client against mocked S3."""
    with mock_aws():
        yield boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def client(s3) -> Client:
    """Client connected to mocked S3."""
    return new_client(config=new_options("test_key", "test_secret"))


@pytest.fixture
def bucket(client):
    """Bucket handle for an existing test bucket."""
    handle = client.bucket(TEST_BUCKET)
    handle.ensure_bucket()
    return handle


@pytest.fixture
def mock_s3():
    """Mock boto3 client for tests that inspect calls."""
    s3 = Mock()
    s3.meta.region_name = "us-east-1"
    s3.meta.endpoint_url = "https://s3.amazonaws.com"
    return s3
