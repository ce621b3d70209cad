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
Transaction request data models.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from txbuilder.constants import MAX_SATOSHIS, MAX_TXOUT_INDEX
from txbuilder.errors import ValidationError
from txbuilder.utils import is_hex


# accepted spellings of the output index, in order of preference
VOUT_KEYS = ("vout", "output_index", "outputIndex")
SCRIPT_PUBKEY_KEYS = ("script_pubkey", "scriptPubKey", "scriptpubkey")
REDEEM_SCRIPT_KEYS = ("redeem_script", "redeemScript")


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid index or amount
    return isinstance(value, int) and not isinstance(value, bool)


def _first_present(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


@dataclass(frozen=True)
class Utxo:
    """An unspent output that can be used as a transaction input

    Attributes
    ----------
    txid : str
        the id of the transaction that created the output, 64 hex characters
        in display order
    vout : int
        the index of the output in that transaction
    value : int
        the amount locked in the output in satoshis
    script_pubkey : str, optional
        hex of the output's locking script
    address : str, optional
        address the output pays to, used when script_pubkey is not known
    redeem_script : str, optional
        hex redeem script, needed to spend P2SH outputs
    """

    txid: str
    vout: int
    value: int
    script_pubkey: Optional[str] = None
    address: Optional[str] = None
    redeem_script: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.txid, str) or not self.txid:
            raise ValidationError("Invalid UTXO format: txid is missing")
        if len(self.txid) != 64 or not is_hex(self.txid):
            raise ValidationError(
                "Invalid UTXO format: txid must be 64 hex characters"
            )
        if not _is_int(self.vout) or not 0 <= self.vout <= MAX_TXOUT_INDEX:
            raise ValidationError(
                "Invalid UTXO format: vout must be an integer in [0, 2^32-1]"
            )
        if not _is_int(self.value) or not 0 <= self.value <= MAX_SATOSHIS:
            raise ValidationError(
                "Invalid UTXO format: value must be a non-negative integer "
                "number of satoshis"
            )
        for name in ("script_pubkey", "redeem_script"):
            script = getattr(self, name)
            if script is not None and (
                not isinstance(script, str) or len(script) % 2 or not is_hex(script)
            ):
                raise ValidationError(
                    "Invalid UTXO format: %s must be a hex string" % name
                )
        if self.address is not None and not isinstance(self.address, str):
            raise ValidationError("Invalid UTXO format: address must be a string")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Utxo:
        """Creates a Utxo from a mapping

        The output index may be given as ``vout``, ``output_index`` or
        ``outputIndex``. Empty optional fields are treated as absent.

        Raises
        ------
        ValidationError
            if a required field is missing or any field is malformed
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid UTXO format: expected a mapping")

        txid = data.get("txid")
        if txid is None or txid == "":
            raise ValidationError("Invalid UTXO format: txid is missing")

        vout = _first_present(data, VOUT_KEYS)
        if vout is None:
            raise ValidationError("Invalid UTXO format: vout is missing")

        value = data.get("value")
        if value is None:
            raise ValidationError("Invalid UTXO format: value is missing")

        return cls(
            txid=txid,
            vout=vout,
            value=value,
            script_pubkey=_first_present(data, SCRIPT_PUBKEY_KEYS) or None,
            address=data.get("address") or None,
            redeem_script=_first_present(data, REDEEM_SCRIPT_KEYS) or None,
        )
