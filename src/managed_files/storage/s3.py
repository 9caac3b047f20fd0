"""
S3 storage backend.

The durable object store: supports per-object canned ACLs, reports whether an
object is world-readable, and can be rendered as a Terraform aws_s3_object.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..settings import Settings
from .base import PUBLIC_READ, ObjectAcl
from .uri import join_key

if TYPE_CHECKING:
    from ..terraform import TerraformWriter

__all__ = ["S3Path", "ALL_USERS_GROUP"]

logger = logging.getLogger(__name__)

ALL_USERS_GROUP = "http://acs.amazonaws.com/groups/global/AllUsers"

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}


def _is_not_found(e: ClientError) -> bool:
    return e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


class S3Path:
    """
    Object in an S3 bucket, addressed as s3://bucket/key.

    The boto3 client is created lazily and shared with every path joined
    from this one. A client can be injected for tests.
    """

    def __init__(self, bucket: str, key: str = "", *, settings: Settings, client: Any = None) -> None:
        self.bucket = bucket
        self.key = key.strip("/")
        self._settings = settings
        self._client = client

    @property
    def path(self) -> str:
        if self.key:
            return f"s3://{self.bucket}/{self.key}"
        return f"s3://{self.bucket}"

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"S3Path({self.path!r})"

    def _get_client(self):
        if self._client is None:
            logger.debug(f"Creating S3 client (region={self._settings.s3_region}, endpoint={self._settings.s3_endpoint_url})")
            self._client = boto3.client(
                "s3",
                region_name=self._settings.s3_region,
                endpoint_url=self._settings.s3_endpoint_url,
            )
        return self._client

    def join(self, *relative: str) -> S3Path:
        return S3Path(self.bucket, join_key(self.key, *relative, base=self.path), settings=self._settings, client=self._client)

    def read_file(self) -> bytes:
        """
        Read the object.

        Raises:
            FileNotFoundError: If the object or bucket does not exist
            OSError: For other S3/network errors
        """
        client = self._get_client()
        try:
            response = client.get_object(Bucket=self.bucket, Key=self.key)
            return response["Body"].read()
        except ClientError as e:
            if _is_not_found(e):
                raise FileNotFoundError(f"Object not found: {self.path}") from e
            raise OSError(f"S3 read error for {self.path}: {e}") from e
        except BotoCoreError as e:
            raise OSError(f"S3 read error for {self.path}: {e}") from e

    def write_file(self, data: bytes, acl: Optional[ObjectAcl]) -> None:
        """
        Upload the object, replacing any existing version.

        Raises:
            OSError: For S3/network errors
        """
        request = {
            "Bucket": self.bucket,
            "Key": self.key,
            "Body": data,
        }
        if self._settings.s3_server_side_encryption:
            request["ServerSideEncryption"] = "AES256"
        if acl is not None and acl.request_acl:
            request["ACL"] = acl.request_acl

        logger.debug(f"Writing {len(data)} bytes to {self.path} (acl={request.get('ACL')})")
        client = self._get_client()
        try:
            client.put_object(**request)
        except (ClientError, BotoCoreError) as e:
            raise OSError(f"S3 upload error for {self.path}: {e}") from e

    def is_public(self) -> bool:
        """
        Check whether the object ACL grants read access to everyone.

        A bucket policy may also make objects readable; that is not reported here.

        Raises:
            FileNotFoundError: If the object does not exist
            OSError: For other S3/network errors
        """
        client = self._get_client()
        try:
            response = client.get_object_acl(Bucket=self.bucket, Key=self.key)
        except ClientError as e:
            if _is_not_found(e):
                raise FileNotFoundError(f"Object not found: {self.path}") from e
            raise OSError(f"S3 ACL query error for {self.path}: {e}") from e
        except BotoCoreError as e:
            raise OSError(f"S3 ACL query error for {self.path}: {e}") from e

        for grant in response.get("Grants", []):
            grantee = grant.get("Grantee", {})
            if grantee.get("Type") != "Group" or grantee.get("URI") != ALL_USERS_GROUP:
                continue
            if grant.get("Permission") in ("READ", "FULL_CONTROL"):
                return True
        return False

    def public_read_acl(self) -> ObjectAcl:
        return PUBLIC_READ

    def render_terraform(
        self,
        writer: TerraformWriter,
        name: str,
        data: BinaryIO,
        acl: Optional[ObjectAcl],
    ) -> None:
        """
        Declare this object as an aws_s3_object resource.

        Objects go through an "aws.files" provider alias so the state store
        region can differ from the region the cluster runs in.
        """
        provider_config: Dict[str, Any] = {}
        if self._settings.s3_region:
            provider_config["region"] = self._settings.s3_region
        if self._settings.s3_endpoint_url:
            provider_config["endpoints"] = {"s3": self._settings.s3_endpoint_url}
            provider_config["s3_use_path_style"] = True
        provider = writer.declare_provider("aws", "files", provider_config)

        content = writer.add_file_bytes("aws_s3_object", name, "content", data.read())

        resource = {
            "bucket": self.bucket,
            "key": self.key,
            "content": content,
            "provider": provider,
        }
        if acl is not None and acl.request_acl:
            resource["acl"] = acl.request_acl
        if self._settings.s3_server_side_encryption:
            resource["server_side_encryption"] = "AES256"

        writer.render_resource("aws_s3_object", name, resource)
