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

__version__ = "0.1.0"

from loguru import logger

from txbuilder.errors import (
    TxBuilderError,
    ValidationError,
    InvalidAmountError,
    InsufficientFundsError,
    UnsupportedAddressError,
    SigningError,
)

from txbuilder.models import Utxo

from txbuilder.keys import (
    PrivateKey,
    PublicKey,
    Address,
    P2pkhAddress,
    P2shAddress,
    SegwitAddress,
    P2wpkhAddress,
    P2wshAddress,
)

from txbuilder.script import Script

from txbuilder.transactions import Transaction, TxInput, TxOutput

from txbuilder.selection import (
    CoinSelector,
    FirstFitSelector,
    LargestFirstSelector,
    FeePolicy,
    FixedFee,
    SizeBasedFee,
    Selection,
)

from txbuilder.change import ChangeCalculator
from txbuilder.script_builder import ScriptBuilder, InputSpend
from txbuilder.signer import Signer, UnsignedTransaction, SignedTransaction
from txbuilder.validator import validate_request, ValidatedRequest

from txbuilder.builder import TransactionBuilder, BuildResult, create_transaction

# library logging is off until the application calls logger.enable("txbuilder")
logger.disable("txbuilder")

__all__ = [
    'TxBuilderError',
    'ValidationError',
    'InvalidAmountError',
    'InsufficientFundsError',
    'UnsupportedAddressError',
    'SigningError',
    'Utxo',
    'PrivateKey',
    'PublicKey',
    'Address',
    'P2pkhAddress',
    'P2shAddress',
    'SegwitAddress',
    'P2wpkhAddress',
    'P2wshAddress',
    'Script',
    'Transaction',
    'TxInput',
    'TxOutput',
    'CoinSelector',
    'FirstFitSelector',
    'LargestFirstSelector',
    'FeePolicy',
    'FixedFee',
    'SizeBasedFee',
    'Selection',
    'ChangeCalculator',
    'ScriptBuilder',
    'InputSpend',
    'Signer',
    'UnsignedTransaction',
    'SignedTransaction',
    'validate_request',
    'ValidatedRequest',
    'TransactionBuilder',
    'BuildResult',
    'create_transaction',
]
