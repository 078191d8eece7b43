"""Resolve the encryption secret from the signed-in user's token.

The secret is the user's stable identifier taken from the JWT claims, the
same value the web client uses. Anyone who can read that identifier can
derive the keys; choosing a stronger secret source is a product decision
that belongs here, not in the crypto core.
"""

from __future__ import annotations

import base64
import json
import re
from dataclasses import dataclass
from typing import Any

_ID_CLAIMS = ("id", "user_id", "sub", "_id")
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class IdentityError(ValueError):
    """Raised when a token cannot be decoded into claims."""


@dataclass(frozen=True)
class Identity:
    """The signed-in user as seen by the client."""

    user_id: str | None
    email: str | None = None

    @property
    def secret(self) -> str | None:
        """Secret used for sealing this user's fields."""
        return self.user_id

    @property
    def is_uuid(self) -> bool:
        return bool(self.user_id and _UUID_RE.match(self.user_id))

    def query_params(self) -> dict[str, str]:
        """User selector expected by the API (``user_uuid`` or ``user_id``)."""
        if not self.user_id:
            return {}
        key = "user_uuid" if self.is_uuid else "user_id"
        return {key: self.user_id}


def decode_token_claims(token: str) -> dict[str, Any]:
    """Decode the payload segment of a JWT without verifying its signature.

    The client never holds the signing key; verification is the server's job.
    """
    parts = token.split(".") if isinstance(token, str) else []
    if len(parts) != 3:
        raise IdentityError("Token is not a JWT")

    segment = parts[1]
    segment += "=" * (-len(segment) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(segment.encode("ascii")))
    except (ValueError, UnicodeDecodeError) as e:
        raise IdentityError("Token payload is not valid JSON") from e

    if not isinstance(claims, dict):
        raise IdentityError("Token payload is not an object")
    return claims


def resolve_identity(claims: dict[str, Any]) -> Identity | None:
    """Pick the user id and e-mail out of token claims.

    The id is the first non-null of ``id``, ``user_id``, ``sub``, ``_id``,
    ``user.id`` and ``user._id``, stringified. Returns ``None`` when neither
    an id nor an e-mail is present.
    """
    nested = claims.get("user") if isinstance(claims.get("user"), dict) else {}
    candidates = [claims.get(k) for k in _ID_CLAIMS]
    candidates += [nested.get("id"), nested.get("_id")]
    raw_id = next((c for c in candidates if c is not None), None)

    user_id = str(raw_id) if raw_id is not None else None
    email = claims.get("email") or nested.get("email")

    if not user_id and not email:
        return None
    return Identity(user_id=user_id, email=email)


def identity_from_token(token: str) -> Identity | None:
    """Decode ``token`` and resolve the identity it carries."""
    return resolve_identity(decode_token_claims(token))
