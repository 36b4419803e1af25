"""Pre-signed uploads of CSV extracts to the uploads bucket.

The browser PUTs the file straight to S3 with a pre-signed URL. The object
created event then reaches ``lambda_function.handle_s3_event``, which reads the
object back with ``read_upload`` and ingests it. Keys look like
``<prefix>/<file_type>/<timestamp>.<uuid>.csv``.
"""

from __future__ import annotations

import time
from uuid import uuid4

import boto3

from config import config

CSV_CONTENT_TYPE = "text/csv"

# Module-level S3 client (re-used across invocations within the same Lambda
# container).  Created lazily on first call to avoid import-time side-effects
# in test environments.
_s3_client = None


def _get_s3_client():
    """Return a cached boto3 S3 client for the configured region."""
    global _s3_client
    if _s3_client is None:
        session = boto3.Session(
            region_name=config.aws.region,
            aws_access_key_id=config.aws.access_key_id or None,
            aws_secret_access_key=config.aws.secret_access_key or None,
        )
        _s3_client = session.client("s3")
    return _s3_client


def upload_key(file_type: str, prefix: str = None) -> str:
    """A new, unique object key for an upload of ``file_type``."""
    prefix = (prefix if prefix is not None else config.uploads.prefix).strip("/")
    name = f"{file_type}/{int(time.time() * 1000)}.{uuid4()}.csv"
    return f"{prefix}/{name}" if prefix else name


def parse_upload_key(key: str, prefix: str = None) -> str:
    """Return the file type encoded in an upload key.

    Raises ``ValueError`` for keys outside the uploads prefix or of another shape.
    """
    prefix = (prefix if prefix is not None else config.uploads.prefix).strip("/")
    parts = [part for part in key.split("/") if part]
    if prefix:
        if not parts or parts[0] != prefix:
            raise ValueError(f"Key is outside the uploads prefix: {key}")
        parts = parts[1:]
    if len(parts) != 2 or not parts[1].endswith(".csv"):
        raise ValueError(f"Invalid upload key format: {key}")
    return parts[0]


def presign_upload(file_type: str, client=None) -> dict:
    """Create a pre-signed PUT URL for a new CSV upload.

    Parameters
    ----------
    file_type:
        Normalised table name, used as a key segment.
    client:
        Optional boto3 S3 client (used for testing). Falls back to the
        module-level cached client.

    Returns
    -------
    dict
        ``url``, ``bucket``, ``key`` and ``expires_in`` (seconds).
    """
    if client is None:
        client = _get_s3_client()
    key = upload_key(file_type)
    url = client.generate_presigned_url(
        ClientMethod="put_object",
        Params={"Bucket": config.uploads.bucket, "Key": key, "ContentType": CSV_CONTENT_TYPE},
        ExpiresIn=config.uploads.presign_expiry,
    )
    return {
        "url": url,
        "bucket": config.uploads.bucket,
        "key": key,
        "expires_in": config.uploads.presign_expiry,
    }


def read_upload(bucket: str, key: str, client=None) -> bytes:
    """Download an uploaded object."""
    if client is None:
        client = _get_s3_client()
    response = client.get_object(Bucket=bucket, Key=key)
    return response["Body"].read()
