"""S3 download stage.

Downloads a document blob to a local scratch directory so the PDF loader
can read it from disk.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from functools import lru_cache
from pathlib import PurePosixPath
from typing import Any

import boto3
from boto3.exceptions import S3TransferFailedError
from botocore.exceptions import BotoCoreError, ClientError

from pdf_ingest.config import settings
from pdf_ingest.errors import FetchError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NoSuchBucket", "NotFound"}


class S3Fetcher:
    """Download objects from one S3 bucket into a temp directory.

    Parameters
    ----------
    bucket:
        Source bucket name.
    region:
        AWS region of the bucket.
    scratch_dir:
        Parent directory for downloads.  ``None`` uses the system temp dir.
    client:
        Pre-built ``boto3`` S3 client (tests inject a mock here).
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        *,
        scratch_dir: str | None = None,
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._region = region
        self._scratch_dir = scratch_dir or None
        self._s3_client = client if client is not None else boto3.client("s3", region_name=region)

    @property
    def bucket(self) -> str:
        return self._bucket

    def fetch(self, key: str) -> str:
        """Download *key* and return the local file path.

        Raises
        ------
        FetchError
            When the key is empty, the object does not exist, or the
            transfer fails.
        """
        if not key:
            raise FetchError("Storage key is required", key)

        # Keys ending in "/" are S3 folder markers, not files.
        filename = PurePosixPath(key).name
        if not filename or key.endswith("/"):
            raise FetchError(f"Invalid storage key: {key!r}", key)

        temp_dir = tempfile.mkdtemp(prefix="pdf_ingest_", dir=self._scratch_dir)
        local_path = os.path.join(temp_dir, filename)

        logger.info("Downloading s3://%s/%s into %s", self._bucket, key, local_path)
        try:
            self._s3_client.download_file(Bucket=self._bucket, Key=key, Filename=local_path)
        except ClientError as exc:
            self.discard(local_path)
            code = exc.response.get("Error", {}).get("Code", "Unknown")
            if code in _NOT_FOUND_CODES:
                raise FetchError(f"Object not found in s3://{self._bucket}: {key}", key) from exc
            raise FetchError(f"Failed to download s3://{self._bucket}/{key}: {exc}", key) from exc
        except (BotoCoreError, S3TransferFailedError, OSError) as exc:
            self.discard(local_path)
            raise FetchError(f"Failed to download s3://{self._bucket}/{key}: {exc}", key) from exc

        return local_path

    async def afetch(self, key: str) -> str:
        """Async wrapper around :meth:`fetch`; the transfer runs in a worker thread."""
        return await asyncio.to_thread(self.fetch, key)

    def discard(self, local_path: str) -> None:
        """Remove a file returned by :meth:`fetch` together with its temp directory."""
        shutil.rmtree(os.path.dirname(local_path), ignore_errors=True)


@lru_cache(maxsize=1)
def get_fetcher() -> S3Fetcher:
    """Return the process-wide fetcher built from settings."""
    client_kwargs: dict[str, Any] = {"region_name": settings.aws_region}
    if settings.aws_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key

    return S3Fetcher(
        settings.s3_bucket,
        settings.aws_region,
        scratch_dir=settings.scratch_dir or None,
        client=boto3.client("s3", **client_kwargs),
    )
