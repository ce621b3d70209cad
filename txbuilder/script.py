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

import copy
import struct
from typing import Any, Union

from txbuilder.utils import b_to_h, h_to_b, hash160


# Legacy op codes. Complete list at: https://en.bitcoin.it/wiki/Script
OP_CODES = {
    # constants
    "OP_0": b"\x00",
    "OP_FALSE": b"\x00",
    "OP_PUSHDATA1": b"\x4c",
    "OP_PUSHDATA2": b"\x4d",
    "OP_PUSHDATA4": b"\x4e",
    "OP_1NEGATE": b"\x4f",
    "OP_1": b"\x51",
    "OP_TRUE": b"\x51",
    "OP_2": b"\x52",
    "OP_3": b"\x53",
    "OP_4": b"\x54",
    "OP_5": b"\x55",
    "OP_6": b"\x56",
    "OP_7": b"\x57",
    "OP_8": b"\x58",
    "OP_9": b"\x59",
    "OP_10": b"\x5a",
    "OP_11": b"\x5b",
    "OP_12": b"\x5c",
    "OP_13": b"\x5d",
    "OP_14": b"\x5e",
    "OP_15": b"\x5f",
    "OP_16": b"\x60",
    # flow control
    "OP_NOP": b"\x61",
    "OP_IF": b"\x63",
    "OP_NOTIF": b"\x64",
    "OP_ELSE": b"\x67",
    "OP_ENDIF": b"\x68",
    "OP_VERIFY": b"\x69",
    "OP_RETURN": b"\x6a",
    # stack
    "OP_DROP": b"\x75",
    "OP_DUP": b"\x76",
    "OP_SWAP": b"\x7c",
    "OP_SIZE": b"\x82",
    # bitwise logic
    "OP_EQUAL": b"\x87",
    "OP_EQUALVERIFY": b"\x88",
    # crypto
    "OP_RIPEMD160": b"\xa6",
    "OP_SHA1": b"\xa7",
    "OP_SHA256": b"\xa8",
    "OP_HASH160": b"\xa9",
    "OP_HASH256": b"\xaa",
    "OP_CODESEPARATOR": b"\xab",
    "OP_CHECKSIG": b"\xac",
    "OP_CHECKSIGVERIFY": b"\xad",
    "OP_CHECKMULTISIG": b"\xae",
    "OP_CHECKMULTISIGVERIFY": b"\xaf",
}

# first name wins so that OP_0/OP_1 are preferred over OP_FALSE/OP_TRUE
CODE_OPS: dict[bytes, str] = {}
for _name, _code in OP_CODES.items():
    CODE_OPS.setdefault(_code, _name)


class Script:
    """Represents a (legacy) Bitcoin script

    A Script contains just a list of OP_CODES and data and also knows how to
    serialize into bytes

    Attributes
    ----------
    script : list
        the list with all the script OP_CODES (str) and data (hex str)

    Methods
    -------
    to_bytes()
        returns a serialized byte version of the script
    to_hex()
        returns a serialized version of the script in hex
    from_raw()
        parses a script from raw bytes or hex (staticmethod)
    copy()
        creates a copy of the object (classmethod)
    to_p2sh_script_pub_key()
        converts script to p2sh scriptPubKey (locking script)
    get_script_type()
        determines the type of script

    Raises
    ------
    ValueError
        If string data is too large
    """

    def __init__(self, script: list[Any]) -> None:
        """See Script description"""
        self.script: list[Any] = script

    @classmethod
    def copy(cls, script: "Script") -> "Script":
        """Deep copy of Script"""
        return cls(copy.deepcopy(script.script))

    def _op_push_data(self, data: str) -> bytes:
        """Converts data to appropriate OP_PUSHDATA OP code including length"""
        data_bytes = h_to_b(data)

        if len(data_bytes) < 0x4C:
            return bytes([len(data_bytes)]) + data_bytes
        elif len(data_bytes) <= 0xFF:
            return b"\x4c" + bytes([len(data_bytes)]) + data_bytes
        elif len(data_bytes) <= 0xFFFF:
            return b"\x4d" + struct.pack("<H", len(data_bytes)) + data_bytes
        elif len(data_bytes) <= 0xFFFFFFFF:
            return b"\x4e" + struct.pack("<I", len(data_bytes)) + data_bytes
        else:
            raise ValueError("Data too large. Cannot push into script")

    def to_bytes(self) -> bytes:
        """Converts the script to bytes"""
        script_bytes = b""
        for token in self.script:
            if token in OP_CODES:
                script_bytes += OP_CODES[token]
            else:
                script_bytes += self._op_push_data(token)
        return script_bytes

    def to_hex(self) -> str:
        """Converts the script to hexadecimal"""
        return b_to_h(self.to_bytes())

    @staticmethod
    def from_raw(scriptrawhex: Union[str, bytes]) -> "Script":
        """
        Imports a Script commands list from raw hexadecimal data (or bytes)

        Raises
        ------
        ValueError
            if the data is truncated or contains an unknown op code
        """
        if isinstance(scriptrawhex, str):
            scriptraw = h_to_b(scriptrawhex)
        elif isinstance(scriptrawhex, bytes):
            scriptraw = scriptrawhex
        else:
            raise TypeError("Input must be a hexadecimal string or bytes")

        commands: list[Any] = []
        index = 0

        while index < len(scriptraw):
            byte = scriptraw[index]
            index += 1

            # direct pushes of 1-75 bytes
            if 0x01 <= byte <= 0x4B:
                bytes_to_read = byte
            elif byte in (0x4C, 0x4D, 0x4E):
                # PUSHDATA1/2/4 carry a 1, 2 or 4 byte little-endian length
                length_size = {0x4C: 1, 0x4D: 2, 0x4E: 4}[byte]
                length_bytes = scriptraw[index : index + length_size]
                if len(length_bytes) != length_size:
                    raise ValueError("Script push length exceeds script length")
                bytes_to_read = int.from_bytes(length_bytes, "little")
                index += length_size
            else:
                op = CODE_OPS.get(bytes([byte]))
                if op is None:
                    raise ValueError("Unknown op code 0x%02x in script" % byte)
                commands.append(op)
                continue

            data = scriptraw[index : index + bytes_to_read]
            if len(data) != bytes_to_read:
                raise ValueError("Script push exceeds script length")
            commands.append(b_to_h(data))
            index += bytes_to_read

        return Script(commands)

    def get_script(self) -> list[Any]:
        """Returns script as array of strings"""
        return self.script

    def to_p2sh_script_pub_key(self) -> "Script":
        """Converts script to p2sh scriptPubKey (locking script)"""
        hex_hash160 = b_to_h(hash160(self.to_bytes()))
        return Script(["OP_HASH160", hex_hash160, "OP_EQUAL"])

    @staticmethod
    def _is_data(token: Any, size: int) -> bool:
        return (
            isinstance(token, str)
            and token not in OP_CODES
            and len(token) == 2 * size
        )

    def is_p2pkh(self) -> bool:
        """OP_DUP OP_HASH160 <20-byte-key-hash> OP_EQUALVERIFY OP_CHECKSIG"""
        ops = self.script
        return (
            len(ops) == 5
            and ops[0] == "OP_DUP"
            and ops[1] == "OP_HASH160"
            and self._is_data(ops[2], 20)
            and ops[3] == "OP_EQUALVERIFY"
            and ops[4] == "OP_CHECKSIG"
        )

    def is_p2sh(self) -> bool:
        """OP_HASH160 <20-byte-script-hash> OP_EQUAL"""
        ops = self.script
        return (
            len(ops) == 3
            and ops[0] == "OP_HASH160"
            and self._is_data(ops[1], 20)
            and ops[2] == "OP_EQUAL"
        )

    def is_p2pk(self) -> bool:
        """<33 or 65 byte public key> OP_CHECKSIG"""
        ops = self.script
        return (
            len(ops) == 2
            and (self._is_data(ops[0], 33) or self._is_data(ops[0], 65))
            and ops[1] == "OP_CHECKSIG"
        )

    def is_p2wpkh(self) -> bool:
        """OP_0 <20-byte-key-hash>"""
        ops = self.script
        return len(ops) == 2 and ops[0] in (0, "OP_0") and self._is_data(ops[1], 20)

    def is_p2wsh(self) -> bool:
        """OP_0 <32-byte-script-hash>"""
        ops = self.script
        return len(ops) == 2 and ops[0] in (0, "OP_0") and self._is_data(ops[1], 32)

    def get_script_type(self) -> str:
        """
        Determine the type of script.

        Returns:
            str: Script type ('p2pkh', 'p2sh', 'p2pk', 'p2wpkh', 'p2wsh', 'unknown')
        """
        if self.is_p2pkh():
            return "p2pkh"
        elif self.is_p2sh():
            return "p2sh"
        elif self.is_p2pk():
            return "p2pk"
        elif self.is_p2wpkh():
            return "p2wpkh"
        elif self.is_p2wsh():
            return "p2wsh"
        return "unknown"

    def __str__(self) -> str:
        return str(self.script)

    def __repr__(self) -> str:
        return self.__str__()

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, Script):
            return False
        return self.to_bytes() == _other.to_bytes()
