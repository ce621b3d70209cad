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

import struct
from typing import Optional, Union

from txbuilder.constants import (
    DEFAULT_TX_SEQUENCE,
    DEFAULT_TX_LOCKTIME,
    DEFAULT_TX_VERSION,
    MAX_SATOSHIS,
    MAX_TXOUT_INDEX,
    SIGHASH_ALL,
)
from txbuilder.script import Script
from txbuilder.utils import (
    encode_varint,
    hash256,
    h_to_b,
    b_to_h,
    parse_compact_size,
)


def _to_field(value: Union[int, str, bytes], name: str) -> bytes:
    """Normalizes a 4-byte little-endian header field given as int, hex or bytes"""
    if isinstance(value, bool):
        raise TypeError("%s must be an int, hex string or bytes" % name)
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError("%s out of range: %d" % (name, value))
        return struct.pack("<I", value)
    if isinstance(value, str):
        value = h_to_b(value)
    if not isinstance(value, bytes) or len(value) != 4:
        raise ValueError("%s must be exactly 4 bytes" % name)
    return value


class TxInput:
    """Represents a transaction input.

    A transaction input requires a transaction id of a UTXO and the index of
    that UTXO.

    Attributes
    ----------
    txid : str
        the transaction id as a hex string (little-endian as displayed by
        tools)
    txout_index : int
        the index of the UTXO that we want to spend
    script_sig : Script
        the script that satisfies the locking conditions (aka unlocking
        script); empty until the input is signed
    sequence : bytes
        the input sequence

    Methods
    -------
    to_bytes()
        serializes TxInput to bytes
    copy()
        creates a copy of the object (classmethod)
    from_raw()
        instantiates object from raw bytes at a cursor (staticmethod)
    """

    def __init__(
        self,
        txid: str,
        txout_index: int,
        script_sig: Optional[Script] = None,
        sequence: Union[int, str, bytes] = DEFAULT_TX_SEQUENCE,
    ) -> None:
        """See TxInput description"""

        if len(txid) != 64:
            raise ValueError("txid must be 64 hex characters")
        if not 0 <= txout_index <= MAX_TXOUT_INDEX:
            raise ValueError("Output index out of range: %d" % txout_index)

        # expected in the format used for displaying Bitcoin hashes
        self.txid = txid.lower()
        self.txout_index = txout_index
        self.script_sig = script_sig if script_sig is not None else Script([])
        self.sequence = _to_field(sequence, "sequence")

    def to_bytes(self) -> bytes:
        """Serializes to bytes"""

        # Hashes are displayed in reverse byte order; the wire carries them
        # in internal order so the txid is reversed here
        txid_bytes = h_to_b(self.txid)[::-1]
        txout_bytes = struct.pack("<L", self.txout_index)
        script_sig_bytes = self.script_sig.to_bytes()

        data = (
            txid_bytes
            + txout_bytes
            + encode_varint(len(script_sig_bytes))
            + script_sig_bytes
            + self.sequence
        )
        return data

    def __str__(self) -> str:
        return str(
            {
                "txid": self.txid,
                "txout_index": self.txout_index,
                "script_sig": self.script_sig,
                "sequence": self.sequence.hex(),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @staticmethod
    def from_raw(txraw: bytes, cursor: int = 0) -> tuple[TxInput, int]:
        """
        Imports a TxInput from a Transaction's raw bytes

        Returns the input and the cursor just after it
        """
        txid, vout = struct.unpack_from("<32sI", txraw, cursor)
        cursor += 36

        script_size, size = parse_compact_size(txraw[cursor:])
        cursor += size

        script_bytes = txraw[cursor : cursor + script_size]
        if len(script_bytes) != script_size:
            raise ValueError("Truncated input script")
        cursor += script_size

        (sequence,) = struct.unpack_from("<4s", txraw, cursor)
        cursor += 4

        tx_input = TxInput(
            txid=b_to_h(txid[::-1]),
            txout_index=vout,
            script_sig=Script.from_raw(script_bytes),
            sequence=sequence,
        )
        return tx_input, cursor

    @classmethod
    def copy(cls, txin: TxInput) -> TxInput:
        """Deep copy of TxInput"""

        return cls(txin.txid, txin.txout_index, Script.copy(txin.script_sig), txin.sequence)


class TxOutput:
    """Represents a transaction output

    Attributes
    ----------
    amount : int
        the value we want to send to this output in satoshis
    script_pubkey : Script
        the script that will lock this amount

    Methods
    -------
    to_bytes()
        serializes TxOutput to bytes
    copy()
        creates a copy of the object (classmethod)
    from_raw()
        instantiates object from raw bytes at a cursor (staticmethod)
    """

    def __init__(self, amount: int, script_pubkey: Script) -> None:
        """See TxOutput description"""

        if not isinstance(amount, int) or isinstance(amount, bool):
            raise TypeError("Amount needs to be in satoshis as an integer")
        if not 0 <= amount <= MAX_SATOSHIS:
            raise ValueError("Amount out of range: %d" % amount)

        self.amount = amount
        self.script_pubkey = script_pubkey

    def to_bytes(self) -> bytes:
        """Serializes to bytes"""

        amount_bytes = struct.pack("<Q", self.amount)
        script_bytes = self.script_pubkey.to_bytes()
        data = amount_bytes + encode_varint(len(script_bytes)) + script_bytes
        return data

    @staticmethod
    def from_raw(txraw: bytes, cursor: int = 0) -> tuple[TxOutput, int]:
        """
        Imports a TxOutput from a Transaction's raw bytes

        Returns the output and the cursor just after it
        """
        (amount,) = struct.unpack_from("<Q", txraw, cursor)
        cursor += 8

        script_size, size = parse_compact_size(txraw[cursor:])
        cursor += size

        script_bytes = txraw[cursor : cursor + script_size]
        if len(script_bytes) != script_size:
            raise ValueError("Truncated output script")
        cursor += script_size

        return TxOutput(amount, Script.from_raw(script_bytes)), cursor

    def __str__(self) -> str:
        return str({"amount": self.amount, "script_pubkey": self.script_pubkey})

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, txout: TxOutput) -> TxOutput:
        """Deep copy of TxOutput"""

        return cls(txout.amount, Script.copy(txout.script_pubkey))


class Transaction:
    """Represents a legacy (non-segwit) Bitcoin transaction

    Attributes
    ----------
    inputs : list (TxInput)
        A list of all the transaction inputs
    outputs : list (TxOutput)
        A list of all the transaction outputs
    locktime : bytes
        The transaction's locktime parameter
    version : bytes
        The transaction version

    Methods
    -------
    to_bytes()
        Serializes Transaction to bytes
    to_hex()
        converts result of to_bytes to hexadecimal string
    from_raw()
        Instantiates a Transaction from serialized raw hexadacimal data (staticmethod)
    get_txid()
        Calculates txid and returns it
    get_size()
        Calculates the tx size
    copy()
        creates a copy of the object (classmethod)
    get_transaction_digest(txin_index, script, sighash)
        returns the transaction input's digest that is to be signed
    """

    def __init__(
        self,
        inputs: Optional[list[TxInput]] = None,
        outputs: Optional[list[TxOutput]] = None,
        locktime: Union[int, str, bytes] = DEFAULT_TX_LOCKTIME,
        version: Union[int, str, bytes] = DEFAULT_TX_VERSION,
    ) -> None:
        """See Transaction description"""

        self.inputs = inputs if inputs is not None else []
        self.outputs = outputs if outputs is not None else []
        self.locktime = _to_field(locktime, "locktime")
        self.version = _to_field(version, "version")

    def to_bytes(self) -> bytes:
        """Serializes transaction to bytes following the Bitcoin protocol
        serialization"""

        inputs_ser = b"".join(txin.to_bytes() for txin in self.inputs)
        outputs_ser = b"".join(txout.to_bytes() for txout in self.outputs)

        return (
            self.version
            + encode_varint(len(self.inputs))
            + inputs_ser
            + encode_varint(len(self.outputs))
            + outputs_ser
            + self.locktime
        )

    def to_hex(self) -> str:
        """Serializes transaction to (lowercase) hex string"""
        return b_to_h(self.to_bytes())

    def get_txid(self) -> str:
        """Calculates the transaction id (txid) and returns it"""
        # double hash and display in reverse byte order
        return b_to_h(hash256(self.to_bytes())[::-1])

    def get_size(self) -> int:
        """Calculates the transaction size in bytes"""
        return len(self.to_bytes())

    @staticmethod
    def from_raw(rawtxhex: Union[str, bytes]) -> Transaction:
        """
        Imports a Transaction from hexadecimal data (or bytes).

        Raises
        ------
        ValueError
            if the data is truncated, has trailing bytes or is segwit encoded
        """
        rawtx = h_to_b(rawtxhex) if isinstance(rawtxhex, str) else rawtxhex

        try:
            version = rawtx[0:4]
            cursor = 4

            if rawtx[cursor : cursor + 2] == b"\x00\x01":
                raise ValueError("Segwit serialized transactions are not supported")

            n_inputs, size = parse_compact_size(rawtx[cursor:])
            cursor += size
            inputs = []
            for _ in range(n_inputs):
                txin, cursor = TxInput.from_raw(rawtx, cursor)
                inputs.append(txin)

            n_outputs, size = parse_compact_size(rawtx[cursor:])
            cursor += size
            outputs = []
            for _ in range(n_outputs):
                txout, cursor = TxOutput.from_raw(rawtx, cursor)
                outputs.append(txout)

            (locktime,) = struct.unpack_from("<4s", rawtx, cursor)
            cursor += 4
        except struct.error as e:
            raise ValueError("Truncated transaction data") from e

        if cursor != len(rawtx):
            raise ValueError("Unexpected trailing data after locktime")

        return Transaction(inputs=inputs, outputs=outputs, version=version, locktime=locktime)

    def __str__(self) -> str:
        return str(
            {
                "inputs": self.inputs,
                "outputs": self.outputs,
                "locktime": self.locktime.hex(),
                "version": self.version.hex(),
            }
        )

    def __repr__(self) -> str:
        return self.__str__()

    @classmethod
    def copy(cls, tx: Transaction) -> Transaction:
        """Deep copy of Transaction"""

        ins = [TxInput.copy(txin) for txin in tx.inputs]
        outs = [TxOutput.copy(txout) for txout in tx.outputs]
        return cls(ins, outs, tx.locktime, tx.version)

    def get_transaction_digest(
        self, txin_index: int, script: Script, sighash: int = SIGHASH_ALL
    ) -> bytes:
        """Returns the transaction's digest for signing.
        https://en.bitcoin.it/wiki/OP_CHECKSIG

        Only SIGHASH_ALL is produced: all inputs and outputs are signed.

        Attributes
        ----------
        txin_index : int
            The index of the input that we wish to sign
        script : Script
            The script code of the UTXO that we want to spend (its
            scriptPubKey, or the redeem script for P2SH)
        sighash : int
            The type of the signature hash to be created
        """
        if sighash != SIGHASH_ALL:
            raise ValueError("Only SIGHASH_ALL is supported")
        if not 0 <= txin_index < len(self.inputs):
            raise IndexError("Input index out of range: %d" % txin_index)

        # clone transaction to modify without messing up the real transaction
        tmp_tx = Transaction.copy(self)

        # make sure all input scriptSigs are empty
        for txin in tmp_tx.inputs:
            txin.script_sig = Script([])

        # the input being signed carries the script code of the UTXO it spends
        tmp_tx.inputs[txin_index].script_sig = script

        # although sighash is one byte it is hashed as a 4 byte value
        tx_for_signing = tmp_tx.to_bytes() + struct.pack("<i", sighash)

        return hash256(tx_for_signing)
