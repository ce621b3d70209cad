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

from collections.abc import Sequence
from typing import Optional

from loguru import logger

from txbuilder.constants import SIGHASH_ALL
from txbuilder.errors import SigningError
from txbuilder.keys import PrivateKey
from txbuilder.script_builder import InputSpend, ScriptBuilder
from txbuilder.transactions import Transaction, TxInput, TxOutput
from txbuilder.utils import b_to_h, h_to_b


class UnsignedTransaction:
    """A transaction template whose inputs carry empty unlocking scripts

    Attributes
    ----------
    spends : tuple (InputSpend)
        for each input, in order, what is needed to sign it
    fee : int
        the fee paid by the transaction in satoshis
    change : int
        the value of the change output, 0 if there is none

    Methods
    -------
    signature_hash(txin_index)
        returns the SIGHASH_ALL digest of an input
    to_hex()
        serializes the unsigned template
    """

    def __init__(
        self,
        tx: Transaction,
        spends: Sequence[InputSpend],
        fee: int,
        change: int = 0,
    ) -> None:
        if len(tx.inputs) != len(spends):
            raise ValueError("Every input needs its spend information")
        self._tx = Transaction.copy(tx)
        self.spends = tuple(spends)
        self.fee = fee
        self.change = change

    @property
    def tx(self) -> Transaction:
        """A copy of the template; the template itself is never modified"""
        return Transaction.copy(self._tx)

    @property
    def inputs(self) -> list[TxInput]:
        return self.tx.inputs

    @property
    def outputs(self) -> list[TxOutput]:
        return self.tx.outputs

    def signature_hash(self, txin_index: int) -> bytes:
        return self._tx.get_transaction_digest(
            txin_index, self.spends[txin_index].script_code, SIGHASH_ALL
        )

    def to_hex(self) -> str:
        return self._tx.to_hex()

    def __repr__(self) -> str:
        return "UnsignedTransaction(%s)" % self.to_hex()


class SignedTransaction:
    """A fully signed transaction, ready to broadcast

    Attributes
    ----------
    signature_hashes : tuple (bytes)
        the digest signed for each input, in input order
    fee : int
        the fee paid by the transaction in satoshis
    """

    def __init__(
        self, tx: Transaction, signature_hashes: Sequence[bytes], fee: int
    ) -> None:
        for index, txin in enumerate(tx.inputs):
            if not txin.script_sig.get_script():
                raise SigningError("Input %d has no unlocking script" % index)
        self._tx = tx
        self.signature_hashes = tuple(signature_hashes)
        self.fee = fee

    @property
    def tx(self) -> Transaction:
        return Transaction.copy(self._tx)

    def to_hex(self) -> str:
        return self._tx.to_hex()

    def get_txid(self) -> str:
        return self._tx.get_txid()

    def get_size(self) -> int:
        return self._tx.get_size()

    def __repr__(self) -> str:
        return "SignedTransaction(%s)" % self.get_txid()


class Signer:
    """Signs every input of an UnsignedTransaction with one key

    Each input is signed independently over its own SIGHASH_ALL digest and
    every signature is verified against the public key before use.
    """

    def __init__(
        self, private_key: PrivateKey, script_builder: Optional[ScriptBuilder] = None
    ) -> None:
        self.private_key = private_key
        self.script_builder = script_builder or ScriptBuilder()

    def sign(self, unsigned: UnsignedTransaction) -> SignedTransaction:
        """Returns a new SignedTransaction; unsigned is left untouched

        Raises
        ------
        SigningError
            if a valid signature cannot be produced for an input
        """
        signed_tx = unsigned.tx
        public_key = self.private_key.get_public_key()
        signature_hashes = []

        for index, spend in enumerate(unsigned.spends):
            digest = unsigned.signature_hash(index)
            logger.debug("Input {} sighash {}", index, b_to_h(digest))

            try:
                signature = self.private_key.sign_digest(digest, SIGHASH_ALL)
            except (ValueError, RuntimeError) as e:
                raise SigningError("Cannot sign input %d: %s" % (index, e)) from e

            # the sighash byte is not part of the DER signature
            if not public_key.verify_digest(h_to_b(signature)[:-1], digest):
                raise SigningError("Signature of input %d does not verify" % index)

            signed_tx.inputs[index].script_sig = self.script_builder.unlocking_script(
                signature,
                spend.public_key if spend.push_public_key else None,
                spend.redeem_script,
            )
            signature_hashes.append(digest)

        return SignedTransaction(signed_tx, signature_hashes, unsigned.fee)
