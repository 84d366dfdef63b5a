"""Tests for the object storage client."""

import io
from typing import Iterator
from unittest.mock import Mock

import pytest
from botocore.exceptions import BotoCoreError, ClientError
from botocore.response import StreamingBody

from conftest import TEST_BUCKET, TEST_OBJECT, Item
from s3_tools import (
    Client,
    GetObjectOptions,
    JSONSerializer,
    ListObjectsOptions,
    MsgPackSerializer,
    PutObjectOptions,
    new_client,
    new_options,
)
from s3_tools.core.exceptions import DecodeError, EncodeError, StorageError


def client_error(code: str, operation: str = "Operation") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def read_all(client: Client, bucket: str, key: str) -> bytes:
    buf = io.BytesIO()
    client.read_bytes(bucket, key, buf)
    return buf.getvalue()


class TestEnsureBucket:
    """Test idempotent bucket creation."""

    def test_creates_missing_bucket(self, client, s3):
        """Test a missing bucket is created."""
        assert client.bucket_exists(TEST_BUCKET) is False
        client.ensure_bucket(TEST_BUCKET)
        assert client.bucket_exists(TEST_BUCKET) is True

    def test_idempotent(self, client, s3):
        """Test a second call succeeds and leaves exactly one bucket."""
        client.ensure_bucket(TEST_BUCKET)
        client.ensure_bucket(TEST_BUCKET)

        names = [b["Name"] for b in s3.list_buckets()["Buckets"]]
        assert names.count(TEST_BUCKET) == 1

    def test_creation_race_is_success(self, mock_s3):
        """Test losing a creation race to ourselves is not an error."""
        mock_s3.head_bucket.side_effect = client_error("404", "HeadBucket")
        mock_s3.create_bucket.side_effect = client_error(
            "BucketAlreadyOwnedByYou", "CreateBucket"
        )

        Client(mock_s3).ensure_bucket(TEST_BUCKET)

        mock_s3.create_bucket.assert_called_once_with(Bucket=TEST_BUCKET)

    def test_permission_failure(self, mock_s3):
        """Test permission errors surface as StorageError."""
        mock_s3.head_bucket.side_effect = client_error("403", "HeadBucket")

        with pytest.raises(StorageError) as exc_info:
            Client(mock_s3).ensure_bucket(TEST_BUCKET)

        assert exc_info.value.code == "403"
        assert exc_info.value.operation == "bucket_exists"
        assert isinstance(exc_info.value.__cause__, ClientError)
        mock_s3.create_bucket.assert_not_called()

    def test_bucket_owned_by_someone_else(self, mock_s3):
        mock_s3.head_bucket.side_effect = client_error("404", "HeadBucket")
        mock_s3.create_bucket.side_effect = client_error(
            "BucketAlreadyExists", "CreateBucket"
        )

        with pytest.raises(StorageError, match="make_bucket"):
            Client(mock_s3).ensure_bucket(TEST_BUCKET)

    def test_remove_bucket(self, client, s3):
        client.ensure_bucket(TEST_BUCKET)
        client.remove_bucket(TEST_BUCKET)
        assert client.bucket_exists(TEST_BUCKET) is False


class TestPutReadBytes:
    """Test raw byte uploads and downloads."""

    def test_byte_identity(self, client, s3):
        """Test bytes read back are exactly the bytes written."""
        test_data = bytes([0x0A, 0x0B, 0x0C, 0x0D, 0x0E, 0x0F])
        client.ensure_bucket(TEST_BUCKET)

        info = client.put_bytes(TEST_BUCKET, TEST_OBJECT, test_data)

        assert info.bucket == TEST_BUCKET
        assert info.key == TEST_OBJECT
        assert info.size == 6
        assert info.etag and not info.etag.startswith('"')
        assert read_all(client, TEST_BUCKET, TEST_OBJECT) == test_data

    def test_large_payload_streams_in_chunks(self, client, s3):
        data = bytes(range(256)) * 1024
        client.ensure_bucket(TEST_BUCKET)
        client.put_bytes(TEST_BUCKET, TEST_OBJECT, data)
        assert read_all(client, TEST_BUCKET, TEST_OBJECT) == data

    def test_byte_range(self, client, s3):
        client.ensure_bucket(TEST_BUCKET)
        client.put_bytes(TEST_BUCKET, TEST_OBJECT, b"0123456789")

        buf = io.BytesIO()
        client.read_bytes(
            TEST_BUCKET, TEST_OBJECT, buf, GetObjectOptions(byte_range=(2, 4))
        )

        assert buf.getvalue() == b"234"

    def test_missing_object(self, client, s3):
        """Test reading a missing key raises StorageError."""
        client.ensure_bucket(TEST_BUCKET)

        with pytest.raises(StorageError) as exc_info:
            read_all(client, TEST_BUCKET, "missing")

        assert exc_info.value.code == "NoSuchKey"
        assert exc_info.value.key == "missing"

    def test_missing_bucket(self, client, s3):
        with pytest.raises(StorageError) as exc_info:
            client.put_bytes("no-such-bucket", TEST_OBJECT, b"data")

        assert exc_info.value.code == "NoSuchBucket"

    def test_stream_closed_after_copy(self, mock_s3):
        body = Mock()
        body.iter_chunks.return_value = iter([b"abc", b"def"])
        mock_s3.get_object.return_value = {"Body": body}
        buf = io.BytesIO()

        Client(mock_s3).read_bytes(TEST_BUCKET, TEST_OBJECT, buf)

        assert buf.getvalue() == b"abcdef"
        body.close.assert_called_once()

    def test_stream_closed_on_partial_copy_failure(self, mock_s3):
        """Test the body is released when the transfer breaks off."""

        def chunks(chunk_size):
            yield b"abc"
            raise BotoCoreError()

        body = Mock()
        body.iter_chunks.side_effect = chunks
        mock_s3.get_object.return_value = {"Body": body}
        buf = io.BytesIO()

        with pytest.raises(StorageError, match="read_bytes"):
            Client(mock_s3).read_bytes(TEST_BUCKET, TEST_OBJECT, buf)

        assert buf.getvalue() == b"abc"
        body.close.assert_called_once()

    def test_stream_closed_when_sink_fails(self, mock_s3):
        body = Mock()
        body.iter_chunks.return_value = iter([b"abc"])
        mock_s3.get_object.return_value = {"Body": body}
        sink = Mock()
        sink.write.side_effect = OSError("disk full")

        with pytest.raises(OSError, match="disk full"):
            Client(mock_s3).read_bytes(TEST_BUCKET, TEST_OBJECT, sink)

        body.close.assert_called_once()


class TestPutRead:
    """Test value uploads and downloads."""

    def test_stored_json_and_value_identity(self, client, s3):
        """Test the JSON wire format and reading the value back."""
        client.ensure_bucket(TEST_BUCKET)
        test_object = Item(name="TestName", amount=12)

        client.put(TEST_BUCKET, TEST_OBJECT, test_object)

        assert read_all(client, TEST_BUCKET, TEST_OBJECT) == (
            b'{"name":"TestName","amount":12}'
        )
        assert client.read(TEST_BUCKET, TEST_OBJECT, Item) == test_object

    def test_read_without_target(self, client, s3):
        client.ensure_bucket(TEST_BUCKET)
        client.put(TEST_BUCKET, TEST_OBJECT, {"tags": ["a", "b"], "count": 2})

        assert client.read(TEST_BUCKET, TEST_OBJECT) == {"tags": ["a", "b"], "count": 2}

    def test_client_default_serializer(self, s3):
        client = new_client(
            config=new_options("test_key", "test_secret"),
            serializer=MsgPackSerializer(),
        )
        client.ensure_bucket(TEST_BUCKET)
        client.put(TEST_BUCKET, TEST_OBJECT, Item(name="packed", amount=1))

        raw = read_all(client, TEST_BUCKET, TEST_OBJECT)
        assert MsgPackSerializer().deserialize(raw, Item) == Item(name="packed", amount=1)
        assert client.read(TEST_BUCKET, TEST_OBJECT, Item).name == "packed"

    def test_override_does_not_change_default(self, client, s3):
        """Test an override applies to one call only."""
        client.ensure_bucket(TEST_BUCKET)
        item = Item(name="TestName", amount=12)

        client.put(TEST_BUCKET, "packed", item, serializer=MsgPackSerializer())
        client.put(TEST_BUCKET, "plain", item)

        assert isinstance(client.serializer, JSONSerializer)
        assert read_all(client, TEST_BUCKET, "plain") == b'{"name":"TestName","amount":12}'
        assert client.read(TEST_BUCKET, "packed", Item, serializer=MsgPackSerializer()) == item
        assert client.read(TEST_BUCKET, "plain", Item) == item

    def test_put_options_are_applied(self, client, s3):
        client.ensure_bucket(TEST_BUCKET)
        client.put(
            TEST_BUCKET,
            TEST_OBJECT,
            Item(name="x", amount=1),
            PutObjectOptions(content_type="application/json", metadata={"owner": "ops"}),
        )

        info = client.stat_object(TEST_BUCKET, TEST_OBJECT)
        assert info.content_type == "application/json"
        assert info.metadata == {"owner": "ops"}

    def test_encode_error_before_upload(self, mock_s3):
        """Test encoding failures never reach the service."""
        with pytest.raises(EncodeError):
            Client(mock_s3).put(TEST_BUCKET, TEST_OBJECT, object())

        mock_s3.put_object.assert_not_called()

    def test_decode_error(self, client, s3):
        """Test undecodable payloads raise DecodeError, not StorageError."""
        client.ensure_bucket(TEST_BUCKET)
        client.put_bytes(TEST_BUCKET, TEST_OBJECT, b"\x00not json")

        with pytest.raises(DecodeError):
            client.read(TEST_BUCKET, TEST_OBJECT, Item)

    def test_decode_error_wrong_shape(self, client, s3):
        client.ensure_bucket(TEST_BUCKET)
        client.put(TEST_BUCKET, TEST_OBJECT, {"name": "no amount"})

        with pytest.raises(DecodeError):
            client.read(TEST_BUCKET, TEST_OBJECT, Item)


class TestObjectOperations:
    """Test forwarded object operations."""

    @pytest.fixture(autouse=True)
    def objects(self, client, s3):
        client.ensure_bucket(TEST_BUCKET)
        for key in ("data/a.txt", "data/b.txt", "data/sub/c.txt", "top.txt"):
            client.put_bytes(TEST_BUCKET, key, key.encode())

    def test_list_recursive(self, client):
        keys = [
            o.key
            for o in client.list_objects(TEST_BUCKET, ListObjectsOptions(recursive=True))
        ]
        assert keys == ["data/a.txt", "data/b.txt", "data/sub/c.txt", "top.txt"]

    def test_list_groups_prefixes(self, client):
        """Test non-recursive listings yield common prefixes."""
        infos = list(client.list_objects(TEST_BUCKET, ListObjectsOptions(prefix="data/")))

        assert [(o.key, o.is_prefix) for o in infos] == [
            ("data/a.txt", False),
            ("data/b.txt", False),
            ("data/sub/", True),
        ]
        assert infos[0].size == len(b"data/a.txt")

    def test_list_max_keys(self, client):
        infos = list(
            client.list_objects(
                TEST_BUCKET, ListObjectsOptions(recursive=True, max_keys=2)
            )
        )
        assert len(infos) == 2

    def test_list_is_fresh_each_call(self, client):
        options = ListObjectsOptions(recursive=True)
        first = list(client.list_objects(TEST_BUCKET, options))
        client.put_bytes(TEST_BUCKET, "zzz.txt", b"late")
        second = list(client.list_objects(TEST_BUCKET, options))

        assert len(second) == len(first) + 1

    def test_stat_object(self, client):
        info = client.stat_object(TEST_BUCKET, "top.txt")

        assert info.key == "top.txt"
        assert info.size == len(b"top.txt")
        assert info.last_modified is not None

    def test_get_object(self, client):
        body = client.get_object(TEST_BUCKET, "top.txt")
        try:
            assert isinstance(body, StreamingBody)
            assert body.read() == b"top.txt"
        finally:
            body.close()

    def test_remove_object(self, client):
        client.remove_object(TEST_BUCKET, "top.txt")

        with pytest.raises(StorageError) as exc_info:
            client.stat_object(TEST_BUCKET, "top.txt")

        assert exc_info.value.code == "404"


def test_list_objects_is_lazy(mock_s3):
    """Test no request is made until the listing is consumed."""
    listing = Client(mock_s3).list_objects(TEST_BUCKET)

    assert isinstance(listing, Iterator)
    mock_s3.get_paginator.assert_not_called()

    mock_s3.get_paginator.return_value.paginate.return_value = iter(
        [{"Contents": [{"Key": "k", "Size": 1, "ETag": '"abc"'}]}]
    )
    infos = list(listing)

    assert infos[0].key == "k"
    assert infos[0].etag == "abc"
    mock_s3.get_paginator.return_value.paginate.assert_called_once_with(
        Bucket=TEST_BUCKET, Delimiter="/"
    )


def test_bucket_factory_inherits_serializer(mock_s3):
    client = Client(mock_s3, MsgPackSerializer())

    handle = client.bucket(TEST_BUCKET)

    assert handle.client is client
    assert handle.bucket_name == TEST_BUCKET
    assert handle.serializer is client.serializer
