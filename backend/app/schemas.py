"""
Pydantic Schemas
Request models for API validation

Binary fields (keys, nonces, hashes, salts) travel as standard Base64 strings
in JSON and are decoded to raw bytes here, before any handler or storage code
runs. Anything that is not strict Base64 is a validation error (422).
The server never interprets the decoded bytes.
"""

import base64
import binascii
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, EmailStr, Field, field_validator

from app.config import settings


def decode_base64(value: Any) -> bytes:
    """Strictly decode a standard-alphabet, padded Base64 string."""
    if not isinstance(value, str):
        raise ValueError("must be a Base64-encoded string")
    try:
        decoded = base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid Base64: {e}") from None
    if not decoded:
        raise ValueError("must not be empty")
    return decoded


# Opaque key material: decoded from Base64, kept out of reprs and logs
Base64Blob = Annotated[bytes, BeforeValidator(decode_base64), Field(repr=False)]


# ════════════════════════════════════════════════════════════
# Auth Schemas
# ════════════════════════════════════════════════════════════

class SignupRequest(BaseModel):
    """Registration payload.
    invite_code: single-use code from POST /auth/invite
    password_hash: client-derived password verifier
    password_salt: salt used for the client-side password derivation,
                   exactly SALT_LENGTH bytes
    public_key / encrypted_private_key / private_key_nonce: the user's key pair,
                   private half encrypted under the password-derived key
    wrapped_personal_key / personal_key_nonce: the personal team key, wrapped
                   for this user
    """
    invite_code: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    password_hash: Base64Blob
    password_salt: Base64Blob
    public_key: Base64Blob
    encrypted_private_key: Base64Blob
    private_key_nonce: Base64Blob
    wrapped_personal_key: Base64Blob
    personal_key_nonce: Base64Blob

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()

    @field_validator("password_salt")
    @classmethod
    def salt_has_expected_length(cls, v: bytes) -> bytes:
        if len(v) != settings.SALT_LENGTH:
            raise ValueError(f"password_salt must be exactly {settings.SALT_LENGTH} bytes")
        return v
