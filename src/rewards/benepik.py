"""
HTTP client for the Benepik rewards API.

Every ``sendRewards`` call carries three layers of protection:

* a short-lived HS256 bearer token signed with the auth key,
* the payload itself, AES-256-CBC encrypted into a ``checksum`` field,
* an HMAC-SHA256 request signature over method, path, timestamp, nonce
  and the JSON payload.
"""
import base64
import hashlib
import hmac
import json
import logging
import os
import time

import jwt
import requests
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from django.conf import settings

logger = logging.getLogger("spotincentive")

SEND_REWARDS_PATH = "/api/sendRewards"
TOKEN_TTL_SECONDS = 900
TOKEN_ISSUER = "benepik-tech"
TOKEN_AUDIENCE = "maytech-corp"

SUCCESS_CODE = 1000
INSUFFICIENT_BALANCE_CODE = 1012

BENEPIK_ERROR_MESSAGES = {
    1001: "Unauthorized IP Address",
    1002: "Invalid Client Code",
    1003: "Client Code Missing",
    1004: "Missing/Invalid Bearer Token",
    1005: "Authentication Failed",
    1006: "Token Expired",
    1007: "Checksum Required",
    1008: "Invalid Checksum",
    1009: "Required Parameter Missing",
    1010: "Input Error",
    1011: "Unauthorized Access",
    1012: "Insufficient Balance",
    1013: "No Rewards to Process",
    1020: "HMAC Header Missing",
    1021: "Request Expired",
    1022: "Replay Request",
    1023: "Invalid Signature or Rate Limit Exceeded",
    1024: "IP Blocked",
    1050: "Pending/Request Accept - Cannot Reinitiate",
    502: "Bad Gateway",
    503: "Benepik Service Temporarily Unavailable",
    504: "Gateway Timeout",
}


class BenepikUnavailable(Exception):
    """The rewards API could not be reached or returned garbage."""


def error_message(http_status, body):
    """Human readable message for a failed call."""
    code = body.get("code") if isinstance(body, dict) else None
    return (
        BENEPIK_ERROR_MESSAGES.get(http_status)
        or BENEPIK_ERROR_MESSAGES.get(code)
        or (body.get("message") if isinstance(body, dict) else None)
        or "Unknown error"
    )


def dumps_compact(payload):
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def make_nonce():
    return os.urandom(16).hex()


def encrypt_checksum(payload, secret_key):
    """``base64(iv + AES-256-CBC(sha256(secret), json(payload)))``."""
    key = hashlib.sha256(secret_key.encode()).digest()
    iv = os.urandom(16)
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    data = padder.update(dumps_compact(payload).encode()) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(data) + encryptor.finalize()
    return base64.b64encode(iv + ciphertext).decode()


def decrypt_checksum(checksum, secret_key):
    """Inverse of :func:`encrypt_checksum`; returns the decoded payload."""
    raw = base64.b64decode(checksum)
    key = hashlib.sha256(secret_key.encode()).digest()
    decryptor = Cipher(algorithms.AES(key), modes.CBC(raw[:16])).decryptor()
    data = decryptor.update(raw[16:]) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return json.loads(unpadder.update(data) + unpadder.finalize())


def sign_request(*, method, path, timestamp, nonce, body, secret_key):
    canonical = "\n".join([method.upper(), path, str(timestamp), nonce, body])
    return hmac.new(secret_key.encode(), canonical.encode(), hashlib.sha256).hexdigest()


class BenepikClient:
    """Thin wrapper around ``POST {base_url}api/sendRewards``."""

    def __init__(
        self,
        *,
        base_url=None,
        auth_key=None,
        secret_key=None,
        client_id=None,
        admin_id=None,
        client_code=None,
        timeout=None,
    ):
        self.base_url = base_url or settings.BENEPIK_BASE_URL
        self.auth_key = auth_key or settings.BENEPIK_AUTH_KEY
        self.secret_key = secret_key or settings.BENEPIK_SECRET_KEY
        self.client_id = client_id or settings.BENEPIK_CLIENT_ID
        self.admin_id = admin_id or settings.BENEPIK_ADMIN_ID
        self.client_code = client_code or settings.BENEPIK_CLIENT_CODE
        self.timeout = timeout or settings.BENEPIK_TIMEOUT
        if self.base_url and not self.base_url.endswith("/"):
            self.base_url += "/"

    def make_token(self, now=None):
        now = int(now if now is not None else time.time())
        claims = {
            "iat": now,
            "exp": now + TOKEN_TTL_SECONDS,
            "iss": TOKEN_ISSUER,
            "aud": TOKEN_AUDIENCE,
            "jti": base64.b64encode(os.urandom(16)).decode(),
            "clientId": int(self.client_id),
            "adminId": int(self.admin_id),
            "event": "reward",
        }
        return jwt.encode(claims, self.auth_key, algorithm="HS256")

    def build_headers(self, payload, *, timestamp=None, nonce=None):
        timestamp = int(timestamp if timestamp is not None else time.time())
        nonce = nonce or make_nonce()
        signature = sign_request(
            method="POST",
            path=SEND_REWARDS_PATH,
            timestamp=timestamp,
            nonce=nonce,
            body=dumps_compact(payload),
            secret_key=self.secret_key,
        )
        return {
            "Authorization": f"Bearer {self.make_token(timestamp)}",
            "REQUESTID": self.client_code,
            "X-TIMESTAMP": str(timestamp),
            "X-NONCE": nonce,
            "X-SIGNATURE": signature,
            "Content-Type": "application/json",
        }

    def send_rewards(self, payload):
        """Send *payload*; return ``(http_status, json_body)``.

        Raises :class:`BenepikUnavailable` when the API is unreachable or
        the client is not configured.
        """
        if not (self.base_url and self.auth_key and self.secret_key):
            raise BenepikUnavailable("Benepik credentials are not configured")

        url = f"{self.base_url}{SEND_REWARDS_PATH.lstrip('/')}"
        body = {"checksum": encrypt_checksum(payload, self.secret_key)}
        headers = self.build_headers(payload)
        rows = len(payload.get("data") or [])
        try:
            response = requests.post(url, json=body, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.error("Benepik sendRewards failed for %d row(s): %s", rows, exc)
            raise BenepikUnavailable(str(exc)) from exc

        try:
            data = response.json()
        except ValueError:
            data = {"message": response.text[:200]}
        logger.info(
            "Benepik sendRewards: %d row(s), HTTP %s, code %s",
            rows,
            response.status_code,
            data.get("code") if isinstance(data, dict) else None,
        )
        return response.status_code, data


def unwrap_response(body):
    """Benepik sometimes nests its result under ``data``."""
    if isinstance(body, dict) and isinstance(body.get("data"), dict):
        return body["data"]
    return body if isinstance(body, dict) else {}


def is_success(http_status, body):
    inner = unwrap_response(body)
    return http_status == 200 and inner.get("code") == SUCCESS_CODE and inner.get("success") == 1
