import boto3
import pytest
from botocore.exceptions import ClientError

from core.infrastructure.adapters.s3_adapter import S3Adapter, resolve_endpoint_url


class TestResolveEndpointUrl:
    def test_missing_env(self) -> None:
        with pytest.raises(RuntimeError):
            resolve_endpoint_url()

    def test_built_from_project_url(self, monkeypatch) -> None:
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co/")

        assert resolve_endpoint_url() == "https://project.supabase.co/storage/v1/s3"

    def test_override_wins(self, monkeypatch) -> None:
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
        monkeypatch.setenv("SUPABASE_S3_ENDPOINT_URL", "http://127.0.0.1:54321/storage/v1/s3")

        assert resolve_endpoint_url() == "http://127.0.0.1:54321/storage/v1/s3"


class TestS3Adapter:
    def test_init_missing_env(self) -> None:
        with pytest.raises(RuntimeError):
            S3Adapter()

    def test_init_from_env(self, monkeypatch) -> None:
        monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")

        adapter = S3Adapter()

        assert adapter._client.meta.endpoint_url == "https://project.supabase.co/storage/v1/s3"

    def test_put_object_success(self, s3_bucket, s3_client, s3_get_object) -> None:
        adapter = S3Adapter(client=boto3.client("s3", region_name="us-east-1"))

        adapter.put_object(
            bucket=s3_bucket,
            key="1700000000000_ab12cd34.webp",
            body=b"image-bytes",
            content_type="image/webp",
            cache_control="max-age=3600",
        )

        obj = s3_get_object("1700000000000_ab12cd34.webp")
        assert obj["body"] == b"image-bytes"
        assert obj["content_type"] == "image/webp"
        assert obj["cache_control"] == "max-age=3600"

    def test_put_object_missing_bucket_raises_client_error(self, aws_mock) -> None:
        adapter = S3Adapter(client=boto3.client("s3", region_name="us-east-1"))

        with pytest.raises(ClientError) as exc:
            adapter.put_object(
                bucket="missing-bucket",
                key="k.webp",
                body=b"data",
                content_type="image/webp",
                cache_control="max-age=3600",
            )

        assert exc.value.response["Error"]["Code"] == "NoSuchBucket"

    def test_delete_objects_success(self, s3_bucket, s3_client) -> None:
        s3_client.put_object(Bucket=s3_bucket, Key="a.webp", Body=b"a")
        adapter = S3Adapter(client=s3_client)

        adapter.delete_objects(bucket=s3_bucket, keys=["a.webp"])

        with pytest.raises(ClientError) as exc:
            s3_client.get_object(Bucket=s3_bucket, Key="a.webp")
        assert exc.value.response["Error"]["Code"] == "NoSuchKey"

    def test_if_none_match_is_forwarded(self) -> None:
        calls: list[dict] = []

        class RecordingClient:
            def put_object(self, **kwargs):
                calls.append(kwargs)

            def delete_objects(self, **kwargs):
                return {}

        adapter = S3Adapter(client=RecordingClient())

        adapter.put_object(
            bucket="b", key="k", body=b"x", content_type="image/webp", cache_control="max-age=60"
        )
        adapter.put_object(
            bucket="b",
            key="k",
            body=b"x",
            content_type="image/webp",
            cache_control="max-age=60",
            if_none_match="*",
        )

        assert "IfNoneMatch" not in calls[0]
        assert calls[1]["IfNoneMatch"] == "*"
        assert calls[1]["Bucket"] == "b"

    def test_put_object_bubbles_client_error(self, monkeypatch, s3_bucket) -> None:
        adapter = S3Adapter(client=boto3.client("s3", region_name="us-east-1"))

        def raise_error(**_):
            raise ClientError(
                {"Error": {"Code": "InternalError"}},
                "PutObject",
            )

        monkeypatch.setattr(adapter._client, "put_object", raise_error)

        with pytest.raises(ClientError):
            adapter.put_object(
                bucket=s3_bucket,
                key="x.webp",
                body=b"data",
                content_type="image/webp",
                cache_control="max-age=3600",
            )
