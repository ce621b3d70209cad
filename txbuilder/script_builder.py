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

import re
from dataclasses import dataclass
from typing import Optional, Union

from base58check import b58decode  # type: ignore
from loguru import logger

from txbuilder.constants import (
    NETWORK_SEGWIT_PREFIXES,
    P2PKH_PREFIX_NETWORKS,
    P2SH_PREFIX_NETWORKS,
)
from txbuilder.errors import SigningError, UnsupportedAddressError, ValidationError
from txbuilder.keys import (
    Address,
    P2pkhAddress,
    P2shAddress,
    P2wpkhAddress,
    P2wshAddress,
    PrivateKey,
    SegwitAddress,
)
from txbuilder.models import Utxo
from txbuilder.script import Script
from txbuilder.utils import b_to_h, h_to_b, hash160

BASE58_ADDRESS = re.compile(r"[1-9A-HJ-NP-Za-km-z]+")

AnyAddress = Union[Address, SegwitAddress]


@dataclass(frozen=True)
class InputSpend:
    """How a selected UTXO is unlocked

    Attributes
    ----------
    utxo : Utxo
        the output being spent
    script_pubkey : Script
        the previous output's locking script
    script_code : Script
        the script the signature hash commits to; the locking script or, for
        P2SH, the redeem script
    public_key : str
        hex public key in the encoding the locking script commits to
    redeem_script : Script, optional
        pushed last in the unlocking script of P2SH spends
    push_public_key : bool
        False when the script code is P2PK and only the signature is needed
    """

    utxo: Utxo
    script_pubkey: Script
    script_code: Script
    public_key: str
    redeem_script: Optional[Script] = None
    push_public_key: bool = True


class ScriptBuilder:
    """Classifies addresses and builds locking and unlocking scripts

    Methods
    -------
    parse_address(address)
        returns the address object for a supported address string
    locking_script(address)
        returns the scriptPubKey paying to address
    change_script(private_key, network, change_address=None)
        returns the locking script of the change output
    previous_locking_script(utxo, private_key)
        returns the locking script of the UTXO being spent
    input_spend(utxo, private_key)
        resolves script code and public key encoding for a UTXO
    unlocking_script(signature, public_key, redeem_script=None)
        returns the scriptSig of a signed input
    """

    def parse_address(self, address: str) -> AnyAddress:
        """Classifies an address by its prefix and returns its object

        Raises
        ------
        UnsupportedAddressError
            if the address is not a valid P2PKH, P2SH, P2WPKH or P2WSH
            address of a known network
        """
        if not isinstance(address, str) or not address:
            raise UnsupportedAddressError("Unsupported address: %r" % (address,))

        try:
            lowered = address.lower()
            if any(lowered.startswith(hrp + "1") for hrp in NETWORK_SEGWIT_PREFIXES.values()):
                return self._parse_segwit_address(address)
            return self._parse_base58_address(address)
        except ValueError as e:
            logger.debug("Rejected address {}: {}", address, e)
            raise UnsupportedAddressError("Unsupported address: %s" % address) from e

    def _parse_base58_address(self, address: str) -> Address:
        if not BASE58_ADDRESS.fullmatch(address):
            raise ValueError("not a base58 string")
        data = b58decode(address.encode("utf-8"))
        prefix = data[:1]
        if prefix in P2PKH_PREFIX_NETWORKS:
            return P2pkhAddress(address=address)
        if prefix in P2SH_PREFIX_NETWORKS:
            return P2shAddress(address=address)
        raise ValueError("unknown version byte %s" % b_to_h(prefix))

    def _parse_segwit_address(self, address: str) -> SegwitAddress:
        try:
            return P2wpkhAddress(address=address)
        except ValueError:
            return P2wshAddress(address=address)

    def locking_script(self, address: AnyAddress) -> Script:
        """Returns the locking script that pays to address"""
        return address.to_script_pub_key()

    def change_script(
        self,
        private_key: PrivateKey,
        network: str,
        change_address: Optional[AnyAddress] = None,
    ) -> Script:
        """Returns the change locking script

        Change goes to change_address when given, otherwise back to the
        P2PKH address of the signing key on network.
        """
        if change_address is not None:
            return self.locking_script(change_address)
        own_address = private_key.get_public_key().get_address(
            compressed=private_key.compressed, network=network
        )
        return own_address.to_script_pub_key()

    def previous_locking_script(self, utxo: Utxo, private_key: PrivateKey) -> Script:
        """Returns the locking script of the output being spent

        Uses the UTXO's script_pubkey, otherwise the script of its address,
        otherwise the P2PKH script of the signing key.
        """
        if utxo.script_pubkey:
            try:
                return Script.from_raw(utxo.script_pubkey)
            except ValueError as e:
                raise ValidationError(
                    "Invalid UTXO format: script_pubkey of %s:%d is not a valid script"
                    % (utxo.txid, utxo.vout)
                ) from e
        if utxo.address:
            return self.locking_script(self.parse_address(utxo.address))
        own_address = private_key.get_public_key().get_address(
            compressed=private_key.compressed
        )
        return own_address.to_script_pub_key()

    def input_spend(self, utxo: Utxo, private_key: PrivateKey) -> InputSpend:
        """Works out what signing key material unlocks utxo

        Raises
        ------
        SigningError
            if the locking script is not spendable by private_key with a
            legacy signature
        """
        script_pubkey = self.previous_locking_script(utxo, private_key)
        script_type = script_pubkey.get_script_type()
        outpoint = "%s:%d" % (utxo.txid, utxo.vout)

        if script_type == "p2sh":
            if not utxo.redeem_script:
                raise SigningError("Cannot sign %s: P2SH input without redeem script" % outpoint)
            try:
                redeem_script = Script.from_raw(utxo.redeem_script)
            except ValueError as e:
                raise ValidationError(
                    "Invalid UTXO format: redeem_script of %s is not a valid script"
                    % outpoint
                ) from e
            if b_to_h(hash160(h_to_b(utxo.redeem_script))) != script_pubkey.script[1]:
                raise SigningError("Cannot sign %s: redeem script does not match" % outpoint)
            public_key, push_public_key = self._match_key(
                redeem_script, private_key, outpoint
            )
            return InputSpend(
                utxo=utxo,
                script_pubkey=script_pubkey,
                script_code=redeem_script,
                public_key=public_key,
                redeem_script=redeem_script,
                push_public_key=push_public_key,
            )

        public_key, push_public_key = self._match_key(script_pubkey, private_key, outpoint)
        return InputSpend(
            utxo=utxo,
            script_pubkey=script_pubkey,
            script_code=script_pubkey,
            public_key=public_key,
            push_public_key=push_public_key,
        )

    def _match_key(
        self, script_code: Script, private_key: PrivateKey, outpoint: str
    ) -> tuple[str, bool]:
        """Returns the public key encoding script_code commits to"""
        public_key = private_key.get_public_key()
        # the key's own encoding first
        encodings = [private_key.compressed, not private_key.compressed]
        script_type = script_code.get_script_type()

        if script_type == "p2pkh":
            for compressed in encodings:
                if public_key.to_hash160(compressed) == script_code.script[2]:
                    return public_key.to_hex(compressed), True
        elif script_type == "p2pk":
            for compressed in encodings:
                if public_key.to_hex(compressed) == script_code.script[0]:
                    return public_key.to_hex(compressed), False
        else:
            raise SigningError(
                "Cannot sign %s: unsupported script type %s" % (outpoint, script_type)
            )

        raise SigningError(
            "Cannot sign %s: script does not commit to the signing key" % outpoint
        )

    def unlocking_script(
        self,
        signature: str,
        public_key: Optional[str],
        redeem_script: Optional[Script] = None,
    ) -> Script:
        """Returns the scriptSig for a signed input

        ``<sig> <pubkey>`` for P2PKH, ``<sig> [<pubkey>] <redeem script>`` for
        P2SH; public_key is None when the script code is P2PK.
        """
        script = [signature]
        if public_key is not None:
            script.append(public_key)
        if redeem_script is not None:
            script.append(b_to_h(redeem_script.to_bytes()))
        return Script(script)

    def placeholder(self) -> Script:
        """The empty scriptSig of an unsigned input"""
        return Script([])

