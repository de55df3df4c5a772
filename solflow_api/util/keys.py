"""Helpers for Solana addresses (base58-encoded 32-byte keys) and amounts."""

import hashlib
from typing import Sequence

B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {c: i for i, c in enumerate(B58_ALPHABET)}

LAMPORTS_PER_SOL = 1_000_000_000


def b58decode(value: str) -> bytes:
    """Decode a base58 string. Raises ValueError on characters outside the alphabet."""
    num = 0
    for ch in value:
        try:
            num = num * 58 + _B58_INDEX[ch]
        except KeyError:
            raise ValueError(f"Invalid base58 character: {ch!r}")
    body = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
    # Leading '1's encode leading zero bytes
    pad = len(value) - len(value.lstrip("1"))
    return b"\x00" * pad + body


def b58encode(data: bytes) -> str:
    num = int.from_bytes(data, "big")
    out = []
    while num:
        num, rem = divmod(num, 58)
        out.append(B58_ALPHABET[rem])
    pad = len(data) - len(data.lstrip(b"\x00"))
    return "1" * pad + "".join(reversed(out))


def is_valid_public_key(value: str) -> bool:
    if not isinstance(value, str) or not 32 <= len(value) <= 44:
        return False
    try:
        return len(b58decode(value)) == 32
    except ValueError:
        return False


def lamports_to_sol(lamports: int) -> float:
    return lamports / LAMPORTS_PER_SOL


# ----------------------------------------------------------------------------
# Program derived addresses
# ----------------------------------------------------------------------------

_P = 2**255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P
_PDA_MARKER = b"ProgramDerivedAddress"


def is_on_curve(key: bytes) -> bool:
    """True when `key` decompresses to a point on the ed25519 curve.

    Only the y coordinate matters: the point exists iff (y^2 - 1) / (d*y^2 + 1)
    is a square mod p.
    """
    if len(key) != 32:
        return False
    y = (int.from_bytes(key, "little") & ((1 << 255) - 1)) % _P
    yy = y * y % _P
    u = (yy - 1) % _P
    v = (_D * yy + 1) % _P
    if v == 0:
        return u == 0
    x2 = u * pow(v, _P - 2, _P) % _P
    return x2 == 0 or pow(x2, (_P - 1) // 2, _P) == 1


def find_program_address(seeds: Sequence[bytes], program_id: str) -> tuple[str, int]:
    """Return (address, bump) for the first bump, from 255 down, that lands off the curve."""
    program = b58decode(program_id)
    for bump in range(255, -1, -1):
        digest = hashlib.sha256(b"".join(seeds) + bytes([bump]) + program + _PDA_MARKER).digest()
        if not is_on_curve(digest):
            return b58encode(digest), bump
    raise ValueError("Unable to find a viable program address bump seed")
