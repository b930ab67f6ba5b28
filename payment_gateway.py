"""Signing helpers for the Amazon Simple Pay gateway.

Simple Pay verifies that a button form was generated by the account owner
with an HMAC over the submitted fields:

1. Remove the ``signature`` field if present.
2. Sort parameters by name, ignoring case.
3. Concatenate every name immediately followed by its value.
4. Compute the HMAC-SHA1 digest with the AWS secret access key and encode it
   as base64.

The gateway signs the parameters it posts back (return URL and IPN) the same
way, so :func:`is_authentic` can check them with the same routine.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from typing import Any, Mapping

import config
from errors import MissingCredentialsError

SIGNATURE_FIELD = "signature"

logger = logging.getLogger(__name__)


def _canonical_string(params: Mapping[str, Any]) -> str:
    filtered = {k: v for k, v in params.items() if k != SIGNATURE_FIELD}
    return "".join(
        f"{k}{'' if v is None else v}"
        for k, v in sorted(filtered.items(), key=lambda item: item[0].lower())
    )


def generate_signature(params: Mapping[str, Any], secret_key: str | None = None) -> str:
    """Return the Simple Pay signature for ``params``.

    Parameters
    ----------
    params:
        Gateway field names mapped to their values. ``None`` values sign as
        empty strings. Any ``"signature"`` key is ignored.
    secret_key:
        AWS secret access key; defaults to the configured one.
    """

    key = secret_key if secret_key is not None else config.SIMPLEPAY_AWS_SECRET_ACCESS_KEY
    if not key:
        raise MissingCredentialsError("SIMPLEPAY_AWS_SECRET_ACCESS_KEY is not set")
    digest = hmac.new(
        key.encode("utf-8"), _canonical_string(params).encode("utf-8"), hashlib.sha1
    ).digest()
    signature = base64.b64encode(digest).decode("ascii")
    logger.debug("signed %d fields", len(params))
    return signature


def is_authentic(params: Mapping[str, Any], secret_key: str | None = None) -> bool:
    """Check the ``signature`` the gateway attached to returned parameters."""

    received = params.get(SIGNATURE_FIELD)
    if not received:
        return False
    expected = generate_signature(params, secret_key)
    return hmac.compare_digest(expected, str(received))


__all__ = ["SIGNATURE_FIELD", "generate_signature", "is_authentic"]
