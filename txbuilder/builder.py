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

"""
Raw transaction builder.

Builds a signed legacy transaction from:
- the UTXOs available to spend
- a target address and amount
- the private key that controls the UTXOs
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Optional, Union

from loguru import logger

from txbuilder.change import ChangeCalculator
from txbuilder.constants import (
    DEFAULT_DUST_THRESHOLD,
    DEFAULT_TX_LOCKTIME,
    DEFAULT_TX_SEQUENCE,
    DEFAULT_TX_VERSION,
)
from txbuilder.errors import InvalidAmountError, TxBuilderError
from txbuilder.script_builder import ScriptBuilder
from txbuilder.selection import CoinSelector, FeePolicy, FirstFitSelector, FixedFee
from txbuilder.signer import SignedTransaction, Signer, UnsignedTransaction
from txbuilder.transactions import Transaction, TxInput
from txbuilder.validator import KeyLike, UtxoLike, ValidatedRequest, validate_request


@dataclass(frozen=True)
class BuildResult:
    """Outcome of TransactionBuilder.try_build

    Exactly one of value and error is set.
    """

    value: Optional[str] = None
    error: Optional[TxBuilderError] = None

    @classmethod
    def success(cls, value: str) -> BuildResult:
        return cls(value=value)

    @classmethod
    def failure(cls, error: TxBuilderError) -> BuildResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[str]:
        return self.error.kind if self.error is not None else None

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None

    def unwrap(self) -> str:
        """Returns the transaction hex or raises the error"""
        if self.error is not None:
            raise self.error
        assert self.value is not None
        return self.value


class TransactionBuilder:
    """Builds signed raw transactions

    Attributes
    ----------
    selector : CoinSelector
        picks the inputs (default first fit in the given order)
    fee_policy : FeePolicy
        decides the fee (default a fixed 1000 satoshis)
    change_calculator : ChangeCalculator
        decides whether a change output is created
    version : int or bytes
        the transaction version (default 1)
    locktime : int or bytes
        the transaction locktime (default 0)
    sequence : int or bytes
        the sequence of every input (default 0xffffffff)
    change_address : str, optional
        where change goes; defaults to the signing key's own P2PKH address

    Methods
    -------
    build(utxos, target_address, amount, private_key, fee=None)
        returns the signed transaction as hex
    build_signed(utxos, target_address, amount, private_key, fee=None)
        returns the SignedTransaction
    build_unsigned(utxos, target_address, amount, private_key, fee=None)
        returns the UnsignedTransaction template
    try_build(utxos, target_address, amount, private_key, fee=None)
        like build but returns a BuildResult instead of raising
    """

    def __init__(
        self,
        selector: Optional[CoinSelector] = None,
        fee_policy: Optional[FeePolicy] = None,
        dust_threshold: int = DEFAULT_DUST_THRESHOLD,
        version: Union[int, bytes] = DEFAULT_TX_VERSION,
        locktime: Union[int, bytes] = DEFAULT_TX_LOCKTIME,
        sequence: Union[int, bytes] = DEFAULT_TX_SEQUENCE,
        change_address: Optional[str] = None,
        script_builder: Optional[ScriptBuilder] = None,
    ) -> None:
        self.selector = selector or FirstFitSelector()
        self.fee_policy = fee_policy or FixedFee()
        self.change_calculator = ChangeCalculator(dust_threshold)
        self.script_builder = script_builder or ScriptBuilder()
        self.version = version
        self.locktime = locktime
        self.sequence = sequence
        self.change_address = change_address
        self._change_address = (
            self.script_builder.parse_address(change_address)
            if change_address
            else None
        )

    def _fee_policy(self, fee: Optional[int]) -> FeePolicy:
        if fee is None:
            return self.fee_policy
        try:
            return FixedFee(fee)
        except ValueError as e:
            raise InvalidAmountError("Invalid fee") from e

    def _assemble(
        self, request: ValidatedRequest, fee: Optional[int] = None
    ) -> UnsignedTransaction:
        selection = self.selector.select(
            request.utxos, request.amount, self._fee_policy(fee)
        )

        spends = [
            self.script_builder.input_spend(utxo, request.private_key)
            for utxo in selection.utxos
        ]

        target_script = self.script_builder.locking_script(request.target_address)
        change_script = self.script_builder.change_script(
            request.private_key, request.target_address.network, self._change_address
        )
        outputs = self.change_calculator.build_outputs(
            selection, request.amount, target_script, change_script
        )

        inputs = [
            TxInput(
                utxo.txid,
                utxo.vout,
                self.script_builder.placeholder(),
                self.sequence,
            )
            for utxo in selection.utxos
        ]
        tx = Transaction(inputs, outputs, self.locktime, self.version)

        paid_fee = selection.total - sum(txout.amount for txout in outputs)
        change = outputs[1].amount if len(outputs) > 1 else 0
        logger.debug(
            "Unsigned transaction: {} inputs, {} outputs, fee {} sat",
            len(inputs),
            len(outputs),
            paid_fee,
        )
        return UnsignedTransaction(tx, spends, paid_fee, change)

    def build_unsigned(
        self,
        utxos: Iterable[UtxoLike],
        target_address: str,
        amount: int,
        private_key: KeyLike,
        fee: Optional[int] = None,
    ) -> UnsignedTransaction:
        request = validate_request(
            utxos, target_address, amount, private_key, self.script_builder
        )
        return self._assemble(request, fee)

    def build_signed(
        self,
        utxos: Iterable[UtxoLike],
        target_address: str,
        amount: int,
        private_key: KeyLike,
        fee: Optional[int] = None,
    ) -> SignedTransaction:
        request = validate_request(
            utxos, target_address, amount, private_key, self.script_builder
        )
        unsigned = self._assemble(request, fee)
        signed = Signer(request.private_key, self.script_builder).sign(unsigned)
        logger.debug("Signed transaction {} ({} bytes)", signed.get_txid(), signed.get_size())
        return signed

    def build(
        self,
        utxos: Iterable[UtxoLike],
        target_address: str,
        amount: int,
        private_key: KeyLike,
        fee: Optional[int] = None,
    ) -> str:
        """Returns the signed raw transaction as lowercase hex

        Raises
        ------
        TxBuilderError
            one of its subclasses, for the first problem found
        """
        return self.build_signed(utxos, target_address, amount, private_key, fee).to_hex()

    def try_build(
        self,
        utxos: Iterable[UtxoLike],
        target_address: str,
        amount: int,
        private_key: KeyLike,
        fee: Optional[int] = None,
    ) -> BuildResult:
        try:
            return BuildResult.success(
                self.build(utxos, target_address, amount, private_key, fee)
            )
        except TxBuilderError as e:
            return BuildResult.failure(e)


def create_transaction(
    utxos: Iterable[UtxoLike],
    target_address: str,
    amount: int,
    private_key: KeyLike,
    **options: Any,
) -> str:
    """Builds and signs a transaction in one call

    ``fee`` overrides the fee for this call; every other option is passed to
    TransactionBuilder.
    """
    fee = options.pop("fee", None)
    return TransactionBuilder(**options).build(
        utxos, target_address, amount, private_key, fee=fee
    )
