"""
StorageClient - minimal S3-compatible object storage client

Signs GET/PUT/DELETE requests with SigV4 query-string authentication and
sends them with ``requests``. Works against any S3-compatible endpoint
(AWS S3, Cloudflare R2, MinIO) using path-style addressing.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import hashlib
import hmac
import logging
from typing import Dict, Optional, Tuple
from urllib.parse import quote, urlparse

import requests

from ..core.config import settings

logger = logging.getLogger(__name__)

UNSIGNED_PAYLOAD = "UNSIGNED-PAYLOAD"


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def _canonical_query(params: Dict[str, str]) -> str:
    return "&".join(
        f"{quote(k, safe='-_.~')}={quote(str(params[k]), safe='-_.~')}" for k in sorted(params)
    )


@dataclass
class SignedRequest:
    url: str
    headers: Dict[str, str]


class StorageClient:
    """
    SigV4 signer plus byte upload/delete helpers.

    Note: Uses query-string authentication with UNSIGNED-PAYLOAD.
    """

    service = "s3"
    algorithm = "AWS4-HMAC-SHA256"

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        bucket: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        region: Optional[str] = None,
    ) -> None:
        self.endpoint_url = (endpoint_url or settings.storage_endpoint_url).rstrip("/")
        self.bucket = bucket or settings.storage_bucket
        self.access_key_id = access_key_id or settings.storage_access_key_id
        self.secret_key = (
            secret_access_key or settings.storage_secret_access_key.get_secret_value()
        )
        self.region = region or settings.storage_region
        if not self.endpoint_url or not self.bucket or not self.access_key_id or not self.secret_key:
            raise RuntimeError("Object storage configuration is missing; check storage_* settings")

        parsed = urlparse(self.endpoint_url)
        self.scheme = parsed.scheme or "https"
        self.host = parsed.netloc or parsed.path

    def object_url(self, object_key: str) -> str:
        return f"{self.scheme}://{self.host}/{self.bucket}/{quote(object_key, safe='/-_.~')}"

    def sign(
        self,
        method: str,
        object_key: str,
        expires_seconds: int = 300,
        content_type: Optional[str] = None,
    ) -> SignedRequest:
        now = datetime.now(timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        datestamp = now.strftime("%Y%m%d")

        canonical_uri = f"/{self.bucket}/{quote(object_key, safe='/-_.~')}"
        credential_scope = f"{datestamp}/{self.region}/{self.service}/aws4_request"
        params: Dict[str, str] = {
            "X-Amz-Algorithm": self.algorithm,
            "X-Amz-Credential": f"{self.access_key_id}/{credential_scope}",
            "X-Amz-Date": amz_date,
            "X-Amz-Expires": str(expires_seconds),
            "X-Amz-SignedHeaders": "host",
            "X-Amz-Content-Sha256": UNSIGNED_PAYLOAD,
        }

        canonical_querystring = _canonical_query(params)
        canonical_request = "\n".join(
            [
                method.upper(),
                canonical_uri,
                canonical_querystring,
                f"host:{self.host}\n",
                "host",
                UNSIGNED_PAYLOAD,
            ]
        )
        string_to_sign = "\n".join(
            [
                self.algorithm,
                amz_date,
                credential_scope,
                hashlib.sha256(canonical_request.encode("utf-8")).hexdigest(),
            ]
        )

        k_date = _hmac(("AWS4" + self.secret_key).encode("utf-8"), datestamp)
        k_signing = _hmac(_hmac(_hmac(k_date, self.region), self.service), "aws4_request")
        signature = hmac.new(k_signing, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

        url = (
            f"{self.scheme}://{self.host}{canonical_uri}"
            f"?{canonical_querystring}&X-Amz-Signature={signature}"
        )
        headers = {"Content-Type": content_type} if content_type else {}
        return SignedRequest(url=url, headers=headers)

    def put_bytes(self, object_key: str, data: bytes, content_type: str) -> Tuple[bool, Optional[int]]:
        signed = self.sign("PUT", object_key, content_type=content_type)
        resp = requests.put(signed.url, data=data, headers=signed.headers, timeout=30)
        return (200 <= resp.status_code < 300, resp.status_code)

    def delete_object(self, object_key: str) -> bool:
        signed = self.sign("DELETE", object_key)
        resp = requests.delete(signed.url, timeout=30)
        return 200 <= resp.status_code < 300 or resp.status_code == 404
