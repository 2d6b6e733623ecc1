"""Webhook signature verification.

Facebook signs every webhook delivery with HMAC-SHA256 of the raw request
body, keyed with the App secret, and sends it as::

    X-Hub-Signature-256: sha256=<hex digest>

The digest must be computed over the exact bytes received. Parsing the JSON
and serializing it again changes whitespace and escaping, and with it the
digest.
"""

import hashlib
import hmac

from src.constants import SIGNATURE_PREFIX


class SignatureVerificationError(Exception):
    """Base exception for rejected webhook signatures."""

    pass


class MissingSignatureError(SignatureVerificationError):
    """Raised when the request carries no signature header."""

    pass


class InvalidSignatureError(SignatureVerificationError):
    """Raised when the signature is malformed or does not match the body."""

    pass


class AppSecretNotConfiguredError(SignatureVerificationError):
    """Raised when no App secret is available to check against."""

    pass


def compute_signature(raw_body: bytes, app_secret: str) -> str:
    """Return the ``sha256=<hex>`` signature Facebook would send for a body."""
    digest = hmac.new(
        key=app_secret.encode("utf-8"),
        msg=raw_body,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


def verify_signature(
    raw_body: bytes,
    signature: str | None,
    app_secret: str | None,
) -> None:
    """
    Verify a webhook signature against the raw request body.

    Args:
        raw_body: Request body exactly as received
        signature: Value of the X-Hub-Signature-256 header (None if absent)
        app_secret: Facebook App secret

    Raises:
        AppSecretNotConfiguredError: No App secret configured
        MissingSignatureError: Header absent or empty
        InvalidSignatureError: Header malformed or digest mismatch
    """
    if not app_secret:
        raise AppSecretNotConfiguredError("FACEBOOK_APP_SECRET is not configured")

    if not signature:
        raise MissingSignatureError("Missing X-Hub-Signature-256 header")

    if not signature.startswith(SIGNATURE_PREFIX):
        raise InvalidSignatureError("Signature header is not sha256=<hex>")

    expected = compute_signature(raw_body, app_secret)

    # Constant-time comparison on bytes; non-ASCII header input never matches
    if not hmac.compare_digest(
        signature.encode("utf-8"), expected.encode("utf-8")
    ):
        raise InvalidSignatureError("Signature does not match request body")


def is_valid_signature(
    raw_body: bytes,
    signature: str | None,
    app_secret: str | None,
) -> bool:
    """Accept/reject form of verify_signature()."""
    try:
        verify_signature(raw_body, signature, app_secret)
    except SignatureVerificationError:
        return False
    return True
