"""Webhook signature verification.

Facebook signs every webhook delivery with the app secret and sends the
result in the ``X-Hub-Signature`` header as ``sha1=<hex digest>``. The
digest covers the raw request body, so verification must run on the exact
bytes received, before any JSON parsing.
"""

import hashlib
import hmac


class SignatureError(Exception):
    """Base exception for webhook signature problems."""

    pass


class SignatureHeaderMissingError(SignatureError):
    """Raised when the request carries no signature header at all."""

    pass


class SignatureMismatchError(SignatureError):
    """Raised when the signature header does not match the request body."""

    pass


def compute_signature(raw_body: bytes, app_secret: str) -> str:
    """Return the ``sha1=<hex>`` header value Facebook would send for a body."""
    digest = hmac.new(app_secret.encode("utf-8"), raw_body, hashlib.sha1).hexdigest()
    return f"sha1={digest}"


def verify_signature(
    raw_body: bytes,
    signature_header: str | None,
    app_secret: str,
) -> None:
    """Verify a webhook body against its signature header.

    The HMAC algorithm is always SHA-1; the label before ``=`` is not used to
    pick the hash. Digests are compared case-sensitively in constant time.

    Args:
        raw_body: Request body exactly as received
        signature_header: Value of the X-Hub-Signature header, if any
        app_secret: Facebook App secret

    Raises:
        SignatureHeaderMissingError: If no header was sent
        SignatureMismatchError: If the header is malformed or does not match
    """
    if not signature_header:
        raise SignatureHeaderMissingError("Couldn't validate the signature.")

    _, separator, received_digest = signature_header.partition("=")
    if not separator or not received_digest:
        raise SignatureMismatchError("Malformed signature header.")

    expected_digest = hmac.new(
        app_secret.encode("utf-8"), raw_body, hashlib.sha1
    ).hexdigest()

    if not hmac.compare_digest(
        expected_digest.encode("ascii"), received_digest.encode("utf-8")
    ):
        raise SignatureMismatchError("Couldn't validate the request signature.")
