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

from typing import Optional


class TxBuilderError(Exception):
    """Base class of all errors raised while building a transaction.

    Attributes
    ----------
    message : str
        the human readable message; ``str(error)`` returns exactly this
    kind : str
        a stable identifier of the error category
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(TxBuilderError, ValueError):
    """A required field is missing or malformed"""

    kind = "validation"


class InvalidAmountError(TxBuilderError, ValueError):
    """The amount to send is not a positive integer number of satoshis"""

    kind = "invalid_amount"

    def __init__(self, message: str = "Invalid amount") -> None:
        super().__init__(message)


class InsufficientFundsError(TxBuilderError):
    """The supplied UTXOs cannot cover amount plus fee

    Attributes
    ----------
    required : int
        amount plus fee in satoshis
    available : int
        the total value of all supplied UTXOs
    """

    kind = "insufficient_funds"

    def __init__(
        self,
        message: str = "Insufficient funds",
        required: Optional[int] = None,
        available: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.required = required
        self.available = available


class UnsupportedAddressError(TxBuilderError, ValueError):
    """The address (or script) encoding is not recognized"""

    kind = "unsupported_address"


class SigningError(TxBuilderError):
    """A signature could not be produced for an input"""

    kind = "signing"
