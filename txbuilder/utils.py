# Copyright (C) 2025-2026 The bitcoin-txbuilder developers
#
# This file is part of bitcoin-txbuilder
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of bitcoin-txbuilder, including this file, may be copied, modified,
# propagated, or distributed except according to the terms contained in the
# LICENSE file.

from __future__ import annotations

import hashlib
import re
import struct

from ripemd.ripemd160 import ripemd160  # type: ignore


_HEX_PATTERN = re.compile(r"[0-9a-fA-F]*")


def encode_varint(i: int) -> bytes:
    """
    Encode a potentially very large integer into varint bytes. The length should be
    specified in little-endian.

    https://bitcoin.org/en/developer-reference#compactsize-unsigned-integers
    """
    if i < 0:
        raise ValueError("Integer cannot be negative: %d" % i)
    if i < 253:
        return bytes([i])
    elif i < 0x10000:
        return b"\xfd" + i.to_bytes(2, "little")
    elif i < 0x100000000:
        return b"\xfe" + i.to_bytes(4, "little")
    elif i < 0x10000000000000000:
        return b"\xff" + i.to_bytes(8, "little")
    else:
        raise ValueError("Integer is too large: %d" % i)


def parse_compact_size(data: bytes) -> tuple[int, int]:
    """
    Parse variable integer. Returns (count, size)
    """
    if not data:
        raise ValueError("Cannot parse compact size from empty data")

    first_byte = data[0]
    if first_byte < 0xFD:
        return (first_byte, 1)
    elif first_byte == 0xFD:
        return (struct.unpack("<H", data[1:3])[0], 3)
    elif first_byte == 0xFE:
        return (struct.unpack("<I", data[1:5])[0], 5)
    else:
        return (struct.unpack("<Q", data[1:9])[0], 9)


def hash256(data: bytes) -> bytes:
    """SHA-256 applied twice, used for txids, checksums and signature hashes"""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def hash160(data: bytes) -> bytes:
    """RIPEMD-160( SHA-256( data ) ), used for public key and script hashes"""
    return ripemd160(hashlib.sha256(data).digest())


def is_hex(value: str) -> bool:
    """Returns True if value is a (possibly empty) string of hex digits"""
    return isinstance(value, str) and _HEX_PATTERN.fullmatch(value) is not None


#
# Basic conversions between bytes (b), hexadecimal (h) and integer (i)
#
def b_to_h(b: bytes) -> str:
    """Converts bytes to hexadecimal string"""
    return b.hex()


def h_to_b(h: str) -> bytes:
    """Converts hexadecimal string to bytes"""
    return bytes.fromhex(h)


# to convert hashes to ints we need byteorder BIG...
def b_to_i(b: bytes) -> int:
    """Converts a bytes to a number"""
    return int.from_bytes(b, byteorder="big")


def i_to_b32(i: int) -> bytes:
    """Converts a integer to bytes"""
    return i.to_bytes(32, byteorder="big")
