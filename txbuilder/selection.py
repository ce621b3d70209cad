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
Coin selection strategies and fee policies.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from txbuilder.constants import (
    DEFAULT_FEE,
    P2PKH_INPUT_SIZE,
    P2PKH_OUTPUT_SIZE,
    TX_OVERHEAD_SIZE,
)
from txbuilder.errors import InsufficientFundsError
from txbuilder.models import Utxo

# target plus change; selection happens before the change is known
ESTIMATED_OUTPUTS = 2


class FeePolicy(ABC):
    """Decides the fee of a transaction from its shape"""

    @abstractmethod
    def estimate(self, num_inputs: int, num_outputs: int) -> int:
        """Returns the fee in satoshis"""


class FixedFee(FeePolicy):
    """The same fee regardless of transaction size"""

    def __init__(self, fee: int = DEFAULT_FEE) -> None:
        if not isinstance(fee, int) or isinstance(fee, bool) or fee < 0:
            raise ValueError("Fee must be a non-negative integer: %r" % (fee,))
        self.fee = fee

    def estimate(self, num_inputs: int, num_outputs: int) -> int:
        return self.fee

    def __repr__(self) -> str:
        return "FixedFee(%d)" % self.fee


class SizeBasedFee(FeePolicy):
    """
    Fee from the estimated size of a legacy P2PKH transaction.

    P2PKH inputs: ~148 bytes each
    P2PKH outputs: 34 bytes each
    Overhead: ~10 bytes
    """

    def __init__(self, sat_per_byte: int) -> None:
        if not isinstance(sat_per_byte, int) or isinstance(sat_per_byte, bool) or sat_per_byte < 0:
            raise ValueError("Fee rate must be a non-negative integer: %r" % (sat_per_byte,))
        self.sat_per_byte = sat_per_byte

    def estimate_size(self, num_inputs: int, num_outputs: int) -> int:
        return (
            TX_OVERHEAD_SIZE
            + num_inputs * P2PKH_INPUT_SIZE
            + num_outputs * P2PKH_OUTPUT_SIZE
        )

    def estimate(self, num_inputs: int, num_outputs: int) -> int:
        return self.estimate_size(num_inputs, num_outputs) * self.sat_per_byte

    def __repr__(self) -> str:
        return "SizeBasedFee(%d)" % self.sat_per_byte


@dataclass(frozen=True)
class Selection:
    """Result of coin selection"""

    utxos: tuple[Utxo, ...]
    total: int
    fee: int


class CoinSelector(ABC):
    """Picks the inputs of a transaction

    Implementations return a Selection whose total covers amount plus the
    fee the policy asks for the selected number of inputs, or raise
    InsufficientFundsError.
    """

    @abstractmethod
    def select(
        self, utxos: Sequence[Utxo], amount: int, fee_policy: FeePolicy
    ) -> Selection:
        pass

    def _accumulate(
        self, ordered: Sequence[Utxo], amount: int, fee_policy: FeePolicy
    ) -> Selection:
        selected: list[Utxo] = []
        total = 0
        fee = fee_policy.estimate(0, ESTIMATED_OUTPUTS)

        for utxo in ordered:
            selected.append(utxo)
            total += utxo.value
            fee = fee_policy.estimate(len(selected), ESTIMATED_OUTPUTS)
            if total >= amount + fee:
                logger.debug(
                    "Selected {} of {} UTXOs: total {} sat, fee {} sat",
                    len(selected),
                    len(ordered),
                    total,
                    fee,
                )
                return Selection(utxos=tuple(selected), total=total, fee=fee)

        raise InsufficientFundsError(
            "Insufficient funds", required=amount + fee, available=total
        )


class FirstFitSelector(CoinSelector):
    """Accumulates UTXOs in the order given until amount plus fee is met"""

    def select(
        self, utxos: Sequence[Utxo], amount: int, fee_policy: FeePolicy
    ) -> Selection:
        return self._accumulate(utxos, amount, fee_policy)


class LargestFirstSelector(CoinSelector):
    """
    Accumulates UTXOs from the largest value down.
    Uses simple greedy selection strategy; ties keep their given order.
    """

    def select(
        self, utxos: Sequence[Utxo], amount: int, fee_policy: FeePolicy
    ) -> Selection:
        ordered = sorted(utxos, key=lambda u: u.value, reverse=True)
        return self._accumulate(ordered, amount, fee_policy)
