"""
JWT inspection

Decodes a token's payload for debugging. The signature is not verified.
"""

import base64
import binascii
import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from wingops.exceptions import ParseError

# Long-form claim types emitted by ASP.NET Core's JwtSecurityTokenHandler
NAME_CLAIMS = ("name", "unique_name", "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/name")
ROLE_CLAIMS = ("role", "roles", "http://schemas.microsoft.com/ws/2008/06/identity/claims/role")


def decode_jwt_payload(token: str) -> Dict[str, Any]:
    """
    Decode the middle segment of a header.payload.signature token.

    Raises:
        ParseError: If the token is not three segments of base64url JSON
    """
    parts = token.strip().split(".")
    if len(parts) != 3:
        raise ParseError(
            "Token must have three dot-separated segments", context=f"Got {len(parts)}"
        )

    segment = parts[1]
    segment += "=" * (-len(segment) % 4)

    try:
        raw = base64.urlsafe_b64decode(segment.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise ParseError("Token payload is not base64url-encoded JSON", context=str(e))

    if not isinstance(payload, dict):
        raise ParseError("Token payload is not a JSON object")

    return payload


def _first(payload: Dict[str, Any], keys) -> Optional[Any]:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def extract_roles(payload: Dict[str, Any]) -> List[str]:
    roles = _first(payload, ROLE_CLAIMS)
    if roles is None:
        return []
    if isinstance(roles, str):
        return [roles]
    return [str(role) for role in roles]


def summarize_claims(payload: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Selected claims in display order."""
    now = now or datetime.now(timezone.utc)

    summary: Dict[str, Any] = {
        "subject": payload.get("sub"),
        "email": payload.get("email"),
        "name": _first(payload, NAME_CLAIMS),
        "roles": extract_roles(payload),
        "issuer": payload.get("iss"),
        "audience": payload.get("aud"),
        "token_id": payload.get("jti"),
    }

    exp = payload.get("exp")
    if isinstance(exp, (int, float)):
        expires = datetime.fromtimestamp(exp, tz=timezone.utc)
        summary["expires"] = expires.isoformat()
        summary["expired"] = expires <= now
    else:
        summary["expires"] = None
        summary["expired"] = None

    return summary
