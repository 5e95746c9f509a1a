"""S3 Folder Adapter - Implementation of DocumentStoragePort using boto3.

Mirrors the local folder layout as key prefixes in one bucket:
``{company_id}/{notprocessed|processed|failed_to_process}/{filename}``.
Works with AWS S3, MinIO and other S3-compatible services.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
from typing import List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ...domain.documents.ports.document_storage_port import DocumentStoragePort, StoredDocument
from ...domain.documents.sync_status import (
    SyncStatus,
    FOLDER_FOR_STATUS,
    INITIAL_STATUS,
    status_for_folder,
)
from ...domain.documents.validation import is_valid_company_folder, mime_type_for_filename
from .errors import StorageError

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(error: ClientError) -> str:
    return error.response.get("Error", {}).get("Code", "Unknown")


class S3FolderStorageAdapter(DocumentStoragePort):
    """S3-compatible document storage using boto3.

    Example:
        config = load_storage_config()
        storage = S3FolderStorageAdapter(
            endpoint_url=config.s3_endpoint_url,
            access_key=config.s3_access_key,
            secret_key=config.s3_secret_key,
            bucket_name=config.s3_bucket_name,
            region=config.s3_region,
        )
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
    ):
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
        except (BotoCoreError, ValueError) as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

        self.bucket_name = bucket_name
        self.region = region

    @staticmethod
    def _key(company_id: str, sync_status: SyncStatus, filename: str) -> str:
        if not is_valid_company_folder(company_id):
            raise StorageError(f"Invalid company folder: {company_id}")
        if "/" in filename or "\\" in filename or not filename:
            raise StorageError(f"Invalid filename: {filename}")
        return f"{company_id}/{FOLDER_FOR_STATUS[sync_status]}/{filename}"

    def _head(self, key: str) -> Optional[dict]:
        try:
            return self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                return None
            raise StorageError(f"Failed to inspect file: {_error_code(e)}")

    def save(self, company_id: str, filename: str, content: bytes) -> StoredDocument:
        key = self._key(company_id, INITIAL_STATUS, filename)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=mime_type_for_filename(filename),
                Metadata={"company_id": company_id},
            )
        except ClientError as e:
            logger.error(f"S3 upload failed: key={key}, error={_error_code(e)}")
            raise StorageError(f"Failed to upload file: {_error_code(e)}")

        logger.info(
            f"Uploaded document: key={key}, size={len(content)}",
            extra={"company_id": company_id, "document_name": filename}
        )
        return self.locate(company_id, filename)

    def list_documents(self, company_id: str) -> List[StoredDocument]:
        if not is_valid_company_folder(company_id):
            raise StorageError(f"Invalid company folder: {company_id}")
        documents = []
        paginator = self.s3_client.get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=f"{company_id}/"):
                for obj in page.get("Contents", []):
                    parts = obj["Key"].split("/")
                    if len(parts) != 3:
                        continue
                    try:
                        sync_status = status_for_folder(parts[1])
                    except ValueError:
                        continue
                    documents.append(StoredDocument(
                        company_id=company_id,
                        filename=parts[2],
                        sync_status=sync_status,
                        size_bytes=obj["Size"],
                        modified_at=obj["LastModified"],
                    ))
        except ClientError as e:
            raise StorageError(f"Failed to list files: {_error_code(e)}")

        documents.sort(key=lambda d: d.modified_at, reverse=True)
        return documents

    def locate(self, company_id: str, filename: str) -> StoredDocument:
        for sync_status in FOLDER_FOR_STATUS:
            head = self._head(self._key(company_id, sync_status, filename))
            if head is not None:
                return StoredDocument(
                    company_id=company_id,
                    filename=filename,
                    sync_status=sync_status,
                    size_bytes=head["ContentLength"],
                    modified_at=head["LastModified"],
                )
        raise FileNotFoundError(f"File not found: {filename}")

    def read(self, company_id: str, filename: str) -> bytes:
        document = self.locate(company_id, filename)
        key = self._key(company_id, document.sync_status, filename)
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise FileNotFoundError(f"File not found: {filename}")
            raise StorageError(f"Failed to retrieve file: {_error_code(e)}")

    def move(self, company_id: str, filename: str, target: SyncStatus) -> StoredDocument:
        document = self.locate(company_id, filename)
        if document.sync_status == target:
            return document

        source_key = self._key(company_id, document.sync_status, filename)
        target_key = self._key(company_id, target, filename)
        try:
            self.s3_client.copy_object(
                Bucket=self.bucket_name,
                Key=target_key,
                CopySource={"Bucket": self.bucket_name, "Key": source_key},
            )
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=source_key)
        except ClientError as e:
            raise StorageError(f"Failed to move file: {_error_code(e)}")

        logger.info(
            f"Moved document: {source_key} -> {target_key}",
            extra={"company_id": company_id, "document_name": filename}
        )
        return self.locate(company_id, filename)

    def delete(self, company_id: str, filename: str) -> None:
        document = self.locate(company_id, filename)
        key = self._key(company_id, document.sync_status, filename)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            raise StorageError(f"Failed to delete file: {_error_code(e)}")
        logger.info(f"Deleted document: key={key}", extra={"company_id": company_id})

    def check_health(self) -> None:
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            if _error_code(e) in _NOT_FOUND_CODES:
                raise StorageError(f"Bucket '{self.bucket_name}' does not exist")
            raise StorageError(f"Failed to verify bucket: {_error_code(e)}")
        except BotoCoreError as e:
            raise StorageError(f"Failed to verify bucket: {e}")
