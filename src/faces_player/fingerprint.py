# noqa: D401
"""Partial-content fingerprints for question images.

Only the first ``IMAGE_PREFIX_BYTES`` of an image are hashed, so the full
image never has to be downloaded. Two different images sharing the same
prefix will collide; that approximation is accepted.

The seeds below key every fingerprint ever persisted. Changing them turns
the whole answer store into dead entries.
"""

from __future__ import annotations

import hashlib
import struct

IMAGE_PREFIX_BYTES = 1024
RANGE_HEADER = f"bytes=0-{IMAGE_PREFIX_BYTES - 1}"

HASH_SEEDS = (
    10960905448801897020,
    6565933669389301275,
    5017652980937232669,
    4134542598451985848,
)

_HASH_KEY = struct.pack("<4Q", *HASH_SEEDS)


def fingerprint(content: bytes) -> int:
    """Return the unsigned 64-bit fingerprint of an image prefix."""

    digest = hashlib.blake2b(
        content[:IMAGE_PREFIX_BYTES], digest_size=8, key=_HASH_KEY
    ).digest()
    return int.from_bytes(digest, "little")


__all__ = ["HASH_SEEDS", "IMAGE_PREFIX_BYTES", "RANGE_HEADER", "fingerprint"]
