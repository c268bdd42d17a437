"""
Opaque pagination cursors for chat message logs.

A cursor means "resume after sequence N in chat C". Clients get it from
one page and hand it back unchanged to fetch the next.

Token layout:
    urlsafe_base64( "c1:<chat uuid hex>:<sequence>" [":" HMAC signature] )

When signing is enabled (the default) the payload is signed with
django.core.signing.Signer (HMAC-SHA256 keyed by CURSOR_SIGNING_KEY or
SECRET_KEY, salted with CURSOR_SALT), so a client cannot forge a cursor
pointing into another chat or position.

Usage:
    from chat.cursors import CursorCodec

    codec = CursorCodec.from_settings()
    token = codec.encode(chat.id, 42)
    position = codec.decode(token)  # CursorPosition(chat_id=..., sequence=42)
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass

from django.core.signing import BadSignature, Signer
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from chat.constants import chat_setting
from chat.exceptions import InvalidCursorError

CURSOR_VERSION = "c1"

_SEQUENCE_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class CursorPosition:
    """Decoded cursor: the next message to return has sequence > this one."""

    chat_id: uuid.UUID
    sequence: int


class CursorCodec:
    """
    Encode and decode cursor tokens.

    Args:
        signed: Attach and verify an HMAC signature
        key: Signing key (defaults to SECRET_KEY)
        salt: Namespace for the signature
    """

    def __init__(
        self,
        signed: bool = True,
        key: str | None = None,
        salt: str = "chat.cursor",
    ) -> None:
        self.signed = signed
        self._signer = (
            Signer(key=key, salt=salt, algorithm="sha256") if signed else None
        )

    @classmethod
    def from_settings(cls) -> CursorCodec:
        return cls(
            signed=chat_setting("CURSOR_SIGNED"),
            key=chat_setting("CURSOR_SIGNING_KEY"),
            salt=chat_setting("CURSOR_SALT"),
        )

    def encode(self, chat_id: uuid.UUID | str, sequence: int) -> str:
        """
        Build the token for (chat_id, sequence).

        Raises:
            ValueError: If chat_id is not a UUID or sequence is negative
        """
        if isinstance(sequence, bool) or not isinstance(sequence, int) or sequence < 0:
            raise ValueError(f"Invalid cursor sequence: {sequence!r}")

        chat_uuid = uuid.UUID(str(chat_id))
        payload = f"{CURSOR_VERSION}:{chat_uuid.hex}:{sequence}"
        if self._signer is not None:
            payload = self._signer.sign(payload)
        return urlsafe_base64_encode(payload.encode("ascii"))

    def decode(self, token: str) -> CursorPosition:
        """
        Parse a token produced by encode().

        Raises:
            InvalidCursorError: If the token is malformed, truncated,
                unsigned when signing is on, or its signature does not match
        """
        if not isinstance(token, str) or not token:
            raise InvalidCursorError("Cursor is empty")

        try:
            payload = urlsafe_base64_decode(token).decode("ascii")
        except (ValueError, UnicodeDecodeError) as exc:
            raise InvalidCursorError("Cursor is malformed") from exc

        if self._signer is not None:
            try:
                payload = self._signer.unsign(payload)
            except BadSignature as exc:
                raise InvalidCursorError("Cursor signature is invalid") from exc

        parts = payload.split(":")
        if len(parts) != 3 or parts[0] != CURSOR_VERSION:
            raise InvalidCursorError("Cursor is malformed")

        _, chat_hex, sequence = parts
        try:
            chat_id = uuid.UUID(hex=chat_hex)
        except ValueError as exc:
            raise InvalidCursorError("Cursor is malformed") from exc
        if not _SEQUENCE_RE.fullmatch(sequence):
            raise InvalidCursorError("Cursor is malformed")

        return CursorPosition(chat_id=chat_id, sequence=int(sequence))
