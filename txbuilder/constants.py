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

NETWORK_WIF_PREFIXES = {
    "mainnet": b"\x80",
    "testnet": b"\xef",
    "regtest": b"\xef",
}

NETWORK_P2PKH_PREFIXES = {
    "mainnet": b"\x00",
    "testnet": b"\x6f",
    "regtest": b"\x6f",
}

NETWORK_P2SH_PREFIXES = {
    "mainnet": b"\x05",
    "testnet": b"\xc4",
    "regtest": b"\xc4",
}

NETWORK_SEGWIT_PREFIXES = {
    "mainnet": "bc",
    "testnet": "tb",
    "regtest": "bcrt",
}

# testnet and regtest share base58 prefixes; testnet is reported for both
P2PKH_PREFIX_NETWORKS = {b"\x00": "mainnet", b"\x6f": "testnet"}
P2SH_PREFIX_NETWORKS = {b"\x05": "mainnet", b"\xc4": "testnet"}
WIF_PREFIX_NETWORKS = {b"\x80": "mainnet", b"\xef": "testnet"}


# Constants for address types
P2PKH_ADDRESS = "p2pkh"
P2SH_ADDRESS = "p2sh"
P2WPKH_ADDRESS_V0 = "p2wpkhv0"
P2WSH_ADDRESS_V0 = "p2wshv0"


# Only the legacy whole-transaction signature hash is produced
SIGHASH_ALL = 0x01


DEFAULT_TX_VERSION = b"\x01\x00\x00\x00"
DEFAULT_TX_LOCKTIME = b"\x00\x00\x00\x00"
DEFAULT_TX_SEQUENCE = b"\xff\xff\xff\xff"


# Monetary constants
MAX_SATOSHIS = 0xFFFFFFFFFFFFFFFF
MAX_TXOUT_INDEX = 0xFFFFFFFF

# Fee and change policy defaults
DEFAULT_FEE = 1000
DEFAULT_DUST_THRESHOLD = 0

# Legacy (non-segwit) size estimates in bytes, used by size based fees
TX_OVERHEAD_SIZE = 10
P2PKH_INPUT_SIZE = 148
P2PKH_OUTPUT_SIZE = 34


# secp256k1 group order
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
