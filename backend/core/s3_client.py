import logging
from functools import lru_cache
from typing import Iterable, List, Tuple

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from core.config import settings

logger = logging.getLogger(__name__)

VIDEO_CONTENT_TYPE = "video/webm"


class StorageError(Exception):
    pass


@lru_cache()
def get_s3_client():
    """
    MinIO/S3 client with explicit credentials and path-style addressing.
    """
    return boto3.client(
        "s3",
        endpoint_url=settings.s3_endpoint or None,
        region_name=settings.s3_region or "us-east-1",
        aws_access_key_id=settings.s3_access_key,
        aws_secret_access_key=settings.s3_secret_key,
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"}  # MinIO-friendly
        ),
    )


def create_signed_upload_url(key: str, expires_in: int | None = None) -> str:
    s3 = get_s3_client()
    try:
        return s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": settings.s3_bucket, "Key": key, "ContentType": VIDEO_CONTENT_TYPE},
            ExpiresIn=expires_in or settings.signed_upload_url_expires,
        )
    except (BotoCoreError, ClientError) as exc:
        raise StorageError(f"Failed to create upload url: {exc}") from exc


def create_signed_download_url(key: str, expires_in: int) -> str:
    s3 = get_s3_client()
    try:
        return s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.s3_bucket, "Key": key},
            ExpiresIn=expires_in,
        )
    except (BotoCoreError, ClientError) as exc:
        raise StorageError(f"Failed to create video url: {exc}") from exc


def delete_object(key: str) -> None:
    s3 = get_s3_client()
    try:
        s3.delete_object(Bucket=settings.s3_bucket, Key=key)
    except (BotoCoreError, ClientError) as exc:
        raise StorageError(str(exc)) from exc


def delete_objects(keys: Iterable[str]) -> Tuple[List[str], List[dict]]:
    """
    Delete each key independently. Returns (deleted, failed) where failed
    entries are {"path", "error"}.
    """
    deleted: List[str] = []
    failed: List[dict] = []
    for key in keys:
        try:
            delete_object(key)
            deleted.append(key)
        except StorageError as exc:
            logger.error("Failed to delete %s: %s", key, exc)
            failed.append({"path": key, "error": str(exc)})
    return deleted, failed
