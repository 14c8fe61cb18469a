"""
Cloudflare R2 (S3-compatible) storage for report attachments and news images.
Uses global config; no per-call reconfiguration.
"""
import asyncio
from io import BytesIO
from typing import Any, Dict, List, Optional
from uuid import uuid4

import boto3
from botocore.exceptions import ClientError
from fastapi import UploadFile

from app.config import settings
from app.core.exceptions import DomainValidationError
from app.core.logging import get_logger

logger = get_logger(__name__)

IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
ATTACHMENT_TYPES = IMAGE_TYPES | {"application/pdf"}


def _r2_client():
    if not settings.R2_ACCOUNT_ID or not settings.R2_ACCESS_KEY_ID or not settings.R2_SECRET_ACCESS_KEY:
        raise RuntimeError(
            "R2 storage not configured: set R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY"
        )
    return boto3.client(
        service_name="s3",
        endpoint_url=f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        region_name="auto",
        config=boto3.session.Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )


def public_url(key: str) -> str:
    """Build public URL for an object key (custom domain or R2 dev URL)."""
    base = settings.STORAGE_PUBLIC_BASE_URL.rstrip("/")
    key = key.lstrip("/")
    return f"{base}/{key}" if key else base


def object_name_for(key_prefix: str, filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    return f"{key_prefix}/{uuid4().hex}.{ext}" if ext else f"{key_prefix}/{uuid4().hex}"


def validate_upload(filename: str, content_type: Optional[str], size: int, allowed: frozenset) -> None:
    """Reject files of a disallowed type, empty files and files over MAX_UPLOAD_BYTES."""
    if content_type not in allowed:
        raise DomainValidationError(f"File type not allowed: {content_type or 'unknown'} ({filename})", field="files")
    if size == 0:
        raise DomainValidationError(f"File is empty: {filename}", field="files")
    if size > settings.MAX_UPLOAD_BYTES:
        raise DomainValidationError(
            f"File too large: {filename} (max {settings.MAX_UPLOAD_BYTES} bytes)", field="files"
        )


async def upload(key_prefix: str, filename: str, content: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Upload bytes to R2 under a unique key and return the stored file record.
    key_prefix: e.g. "reports/{report_id}" or "news/{news_id}"
    """
    object_name = object_name_for(key_prefix, filename)
    client = _r2_client()
    bucket = settings.R2_BUCKET_NAME
    extra = {"ContentType": content_type} if content_type else {}

    def _put():
        try:
            client.upload_fileobj(
                BytesIO(content),
                bucket,
                object_name,
                ExtraArgs=extra,
            )
        except ClientError as e:
            raise RuntimeError(f"Storage upload failed: {e}") from e

    await asyncio.to_thread(_put)
    logger.info("File uploaded", extra={"key": object_name, "size": len(content)})
    return {
        "filename": object_name.rsplit("/", 1)[-1],
        "original_name": filename,
        "url": public_url(object_name),
        "size": len(content),
        "mimetype": content_type,
    }


async def read_validated(files: List[UploadFile], allowed: frozenset) -> list:
    """Read every UploadFile and validate it before anything is uploaded."""
    payloads = []
    for f in files:
        content = await f.read()
        name = f.filename or "upload"
        validate_upload(name, f.content_type, len(content), allowed)
        payloads.append((name, content, f.content_type))
    return payloads


async def upload_payloads(key_prefix: str, payloads: list) -> list:
    return [await upload(key_prefix, name, content, ctype) for name, content, ctype in payloads]


async def upload_all(key_prefix: str, files: list, allowed: frozenset) -> list:
    payloads = await read_validated(files, allowed)
    return await upload_payloads(key_prefix, payloads)
