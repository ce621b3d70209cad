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

from loguru import logger

from txbuilder.constants import DEFAULT_DUST_THRESHOLD
from txbuilder.errors import InsufficientFundsError
from txbuilder.script import Script
from txbuilder.selection import Selection
from txbuilder.transactions import TxOutput


class ChangeCalculator:
    """Computes the value returned to the sender and the transaction outputs

    Attributes
    ----------
    dust_threshold : int
        change below this many satoshis is left to the fee instead of
        creating an output

    Methods
    -------
    compute_change(selection, amount)
        returns the leftover value of a selection
    build_outputs(selection, amount, target_script, change_script)
        returns the target output followed by the change output, if any
    """

    def __init__(self, dust_threshold: int = DEFAULT_DUST_THRESHOLD) -> None:
        if (
            not isinstance(dust_threshold, int)
            or isinstance(dust_threshold, bool)
            or dust_threshold < 0
        ):
            raise ValueError("Dust threshold must be a non-negative integer")
        self.dust_threshold = dust_threshold

    def compute_change(self, selection: Selection, amount: int) -> int:
        change = selection.total - amount - selection.fee
        if change < 0:
            raise InsufficientFundsError(
                "Insufficient funds",
                required=amount + selection.fee,
                available=selection.total,
            )
        return change

    def has_change_output(self, change: int) -> bool:
        return change > 0 and change >= self.dust_threshold

    def build_outputs(
        self,
        selection: Selection,
        amount: int,
        target_script: Script,
        change_script: Script,
    ) -> list[TxOutput]:
        change = self.compute_change(selection, amount)
        outputs = [TxOutput(amount, target_script)]

        if self.has_change_output(change):
            outputs.append(TxOutput(change, change_script))
            logger.debug("Change output of {} sat", change)
        elif change:
            logger.debug(
                "Change of {} sat below dust threshold {}; added to fee",
                change,
                self.dust_threshold,
            )

        return outputs
