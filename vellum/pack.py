"""Helpers for packing transition and output sizes."""

PACK_OUT_MASK = (1 << 4) - 1
MAX_NUM_TRANS = (1 << 6) - 1


def delta_addr(base: int, trans: int) -> int:
    """Return the address of ``trans`` relative to ``base``; 0 stays 0."""
    if trans == 0:
        return 0
    return (base - trans) & 0xFFFF_FFFF_FFFF_FFFF


def encode_pack_size(trans_size: int, out_size: int) -> int:
    """Pack the transition and output sizes into a single byte."""
    return ((trans_size << 4) | out_size) & 0xFF


def decode_pack_size(pack: int) -> tuple[int, int]:
    """Split a packed size byte into (transition size, output size)."""
    return pack >> 4, pack & PACK_OUT_MASK


def encode_num_trans(n: int) -> int:
    """Encode a transition count in one byte, or 0 if it does not fit."""
    return n if n <= MAX_NUM_TRANS else 0


def read_packed_uint(data: bytes) -> int:
    """Decode a little-endian unsigned integer."""
    return int.from_bytes(data, "little")