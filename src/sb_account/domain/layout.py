"""Fixed-width binary record layouts: shared primitives + AuthorityMeta.

Layouts are little-endian with no padding. A stored record is the 8-byte
discriminator sha256("account:<Name>")[:8] followed by the body; rent is
sized on discriminator + body.
"""

import hashlib
import struct

from src.sb_account.domain.addressing import identity_bytes
from src.sb_account.domain.models import AuthorityMeta

DISCRIMINATOR_LEN = 8

_AUTHORITY_META = struct.Struct("<32sHB")
AUTHORITY_META_SIZE = _AUTHORITY_META.size  # 35
AUTHORITY_META_SPACE = DISCRIMINATOR_LEN + AUTHORITY_META_SIZE


def discriminator(account_name: str) -> bytes:
    return hashlib.sha256(f"account:{account_name}".encode()).digest()[:DISCRIMINATOR_LEN]


def pack_fixed_text(text: str, width: int) -> bytes:
    """UTF-8 encode and zero-pad to `width`. Caller has validated the length."""
    raw = text.encode("utf-8")
    if len(raw) > width:
        raise ValueError(f"text is {len(raw)} bytes, field holds {width}")
    return raw.ljust(width, b"\x00")


def encode_authority_meta(meta: AuthorityMeta) -> bytes:
    body = _AUTHORITY_META.pack(identity_bytes(meta.authority), meta.next_cycle, meta.bump)
    return discriminator("AuthorityMeta") + body
