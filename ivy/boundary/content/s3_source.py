"""
S3 content source.

Lists the content tree under a bucket prefix and downloads every indexed
Markdown file. A file that fails to download is skipped; failing to list
the bucket fails the whole fetch.

Dependencies: boto3, fastapi.concurrency
System role: Corpus provider for hosted deployments
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ivy.boundary.content.layout import slug_for, strip_front_matter
from ivy.core.exceptions import ContentSourceError
from ivy.models.content import ContentDocument

logger = logging.getLogger(__name__)


class S3ContentSource:
    """ContentSource reading Markdown objects from an S3 bucket."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "content/",
        region: str = "ap-southeast-2",
        client=None,
    ) -> None:
        """
        Initialize S3 content source.

        Args:
            bucket: S3 bucket name
            prefix: Key prefix of the content root
            region: AWS region for the bucket
            client: Optional preconfigured boto3 S3 client
        """
        self._bucket = bucket
        self._prefix = prefix if not prefix or prefix.endswith("/") else f"{prefix}/"
        self._s3_client = client or boto3.client("s3", region_name=region)

    def _list_keys(self) -> list[str]:
        paginator = self._s3_client.get_paginator("list_objects_v2")
        keys = []
        for page in paginator.paginate(Bucket=self._bucket, Prefix=self._prefix):
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])
        return sorted(keys)

    def _download(self, key: str) -> str:
        response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
        return response["Body"].read().decode("utf-8")

    def _fetch(self) -> list[ContentDocument]:
        try:
            keys = self._list_keys()
        except (ClientError, BotoCoreError) as e:
            raise ContentSourceError(
                f"Failed to list s3://{self._bucket}/{self._prefix}: {type(e).__name__}",
                details={"bucket": self._bucket, "prefix": self._prefix},
            ) from e

        documents = []
        for key in keys:
            slug = slug_for(key[len(self._prefix):])
            if slug is None:
                continue
            try:
                text = self._download(key)
            except (ClientError, BotoCoreError, UnicodeDecodeError) as e:
                logger.error(f"{__name__}:_fetch - Failed to fetch {slug}: {type(e).__name__}")
                continue
            documents.append(ContentDocument(slug=slug, content=strip_front_matter(text)))
        return documents

    async def afetch_documents(self) -> list[ContentDocument]:
        """
        Download every indexed document.

        Returns:
            list[ContentDocument]: Documents sorted by key; failed downloads skipped

        Raises:
            ContentSourceError: Bucket listing failed
        """
        documents = await run_in_threadpool(self._fetch)
        logger.info(
            f"{__name__}:afetch_documents - Fetched {len(documents)} documents "
            f"from s3://{self._bucket}/{self._prefix}"
        )
        return documents
