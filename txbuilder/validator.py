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

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from loguru import logger

from txbuilder.constants import MAX_SATOSHIS
from txbuilder.errors import InvalidAmountError, ValidationError
from txbuilder.keys import PrivateKey
from txbuilder.models import Utxo
from txbuilder.script_builder import AnyAddress, ScriptBuilder
from txbuilder.utils import h_to_b, is_hex

UtxoLike = Union[Utxo, Mapping[str, Any]]
KeyLike = Union[str, bytes, PrivateKey]


@dataclass(frozen=True)
class ValidatedRequest:
    """A request whose every field has been checked and parsed"""

    utxos: tuple[Utxo, ...]
    target_address: AnyAddress
    amount: int
    private_key: PrivateKey


def validate_request(
    utxos: Optional[Iterable[UtxoLike]],
    target_address: Optional[str],
    amount: Any,
    private_key: Optional[KeyLike],
    script_builder: Optional[ScriptBuilder] = None,
) -> ValidatedRequest:
    """Checks a transaction request before any work is done

    Presence of every field is checked first, then each field is parsed.

    Raises
    ------
    ValidationError
        no UTXOs, missing or invalid private key, missing target address or
        a malformed UTXO
    UnsupportedAddressError
        if the target address is not recognized
    InvalidAmountError
        if amount is not a positive integer number of satoshis
    """
    if script_builder is None:
        script_builder = ScriptBuilder()

    utxo_list = list(utxos) if utxos is not None else []
    if not utxo_list:
        raise ValidationError("No UTXOs provided")
    if _is_blank_key(private_key):
        raise ValidationError("Private key is missing")
    if target_address is None or target_address == "":
        raise ValidationError("Target address is missing")
    validate_amount(amount)

    parsed_utxos = tuple(parse_utxo(utxo) for utxo in utxo_list)
    check_unique_outpoints(parsed_utxos)
    key = parse_private_key(private_key)
    address = script_builder.parse_address(target_address)

    logger.debug(
        "Validated request: {} UTXOs, {} sat to {} address on {}",
        len(parsed_utxos),
        amount,
        address.get_type(),
        address.network,
    )
    return ValidatedRequest(
        utxos=parsed_utxos, target_address=address, amount=amount, private_key=key
    )


def validate_amount(amount: Any) -> int:
    """Returns amount if it is an integer in [1, 2^64-1]"""
    if (
        not isinstance(amount, int)
        or isinstance(amount, bool)
        or not 0 < amount <= MAX_SATOSHIS
    ):
        raise InvalidAmountError("Invalid amount")
    return amount


def check_unique_outpoints(utxos: Iterable[Utxo]) -> None:
    """Raises ValidationError if the same output is listed twice"""
    seen = set()
    for utxo in utxos:
        outpoint = (utxo.txid.lower(), utxo.vout)
        if outpoint in seen:
            raise ValidationError(
                "Invalid UTXO format: %s:%d is listed more than once"
                % (utxo.txid, utxo.vout)
            )
        seen.add(outpoint)


def parse_utxo(utxo: UtxoLike) -> Utxo:
    if isinstance(utxo, Utxo):
        return utxo
    if isinstance(utxo, Mapping):
        return Utxo.from_dict(utxo)
    raise ValidationError(
        "Invalid UTXO format: expected a mapping, got %s" % type(utxo).__name__
    )


def _is_blank_key(private_key: Optional[KeyLike]) -> bool:
    """True for None, empty bytes and strings that hold no key digits"""
    if private_key is None:
        return True
    if isinstance(private_key, bytes):
        return not private_key
    if isinstance(private_key, str):
        key_str = private_key.strip()
        return key_str == "" or key_str.lower() == "0x"
    return False


def parse_private_key(private_key: KeyLike) -> PrivateKey:
    """Parses a key given as hex, raw 32 bytes or WIF

    Hex keys may carry a 0x prefix. Only whole bytes are decoded: a dangling
    final nibble of an odd length hex string is dropped.

    Raises
    ------
    ValidationError
        if the key cannot be parsed or is not in [1, n-1]
    """
    if isinstance(private_key, PrivateKey):
        return private_key

    if _is_blank_key(private_key):
        raise ValidationError("Private key is missing")

    try:
        if isinstance(private_key, bytes):
            return PrivateKey.from_bytes(private_key)

        if not isinstance(private_key, str):
            raise ValueError("unsupported key type %s" % type(private_key).__name__)

        key_str = private_key.strip()
        hex_str = key_str[2:] if key_str[:2].lower() == "0x" else key_str
        if is_hex(hex_str):
            if len(hex_str) % 2:
                logger.warning("Private key hex has odd length; ignoring last digit")
                hex_str = hex_str[:-1]
            return PrivateKey.from_bytes(h_to_b(hex_str))

        return PrivateKey.from_wif(key_str)
    except ValueError as e:
        # the reason never contains key material
        logger.debug("Private key rejected: {}", e)
        raise ValidationError("Invalid private key") from e
