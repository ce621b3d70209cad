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

import hashlib
import re
import struct
from abc import ABC, abstractmethod
from typing import Optional

import bech32  # type: ignore
from base58check import b58encode, b58decode  # type: ignore
from ecdsa import SigningKey, VerifyingKey, SECP256k1, BadSignatureError  # type: ignore
from ecdsa.der import UnexpectedDER  # type: ignore
from ecdsa.errors import MalformedPointError  # type: ignore
from ecdsa.util import sigencode_der, sigdecode_der  # type: ignore

from txbuilder.constants import (
    NETWORK_WIF_PREFIXES,
    NETWORK_P2PKH_PREFIXES,
    NETWORK_P2SH_PREFIXES,
    NETWORK_SEGWIT_PREFIXES,
    P2PKH_PREFIX_NETWORKS,
    P2SH_PREFIX_NETWORKS,
    WIF_PREFIX_NETWORKS,
    P2PKH_ADDRESS,
    P2SH_ADDRESS,
    P2WPKH_ADDRESS_V0,
    P2WSH_ADDRESS_V0,
    SECP256K1_ORDER,
    SIGHASH_ALL,
)
from txbuilder.script import Script
from txbuilder.utils import b_to_h, h_to_b, b_to_i, i_to_b32, hash160, hash256


class PrivateKey:
    """Represents an ECDSA private key.

    Attributes
    ----------
    key : SigningKey
        the ecdsa signing key over secp256k1
    compressed : bool
        whether the corresponding public key is used in compressed SEC form
    network : str or None
        the network of the WIF the key was imported from, if any

    Methods
    -------
    from_wif(wif)
        creates an object from a WIF of WIFC format (string)
    from_bytes()
        creates an object from raw 32 bytes
    from_hex()
        creates an object from a 64 character hex string
    to_wif(compressed=True, network="mainnet")
        returns as WIFC (compressed) or WIF format (string)
    to_bytes()
        returns the key's raw bytes
    sign_digest(tx_digest, sighash=SIGHASH_ALL)
        signs an already computed signature hash
    get_public_key()
        returns the corresponding PublicKey object
    """

    def __init__(
        self,
        wif: Optional[str] = None,
        secret_exponent: Optional[int] = None,
        b: Optional[bytes] = None,
        compressed: bool = True,
    ) -> None:
        """With no parameters a random key is created

        Parameters
        ----------
        wif : str, optional
            the key in WIF of WIFC format (default None)
        secret_exponent : int, optional
            used to create a specific key deterministically (default None)
        b : bytes, optional
            used to create a key from raw bytes
        compressed : bool
            ignored for WIF keys, which carry their own compression flag

        Raises
        ------
        ValueError
            if the key is malformed or not in the range [1, n-1]
        """

        self.compressed = compressed
        self.network: Optional[str] = None

        if wif is not None:
            self._from_wif(wif)
        elif b is not None:
            self._from_bytes(b)
        elif secret_exponent is not None:
            self._from_secret_exponent(secret_exponent)
        else:
            self.key = SigningKey.generate(curve=SECP256k1)

    def to_bytes(self) -> bytes:
        """Returns key's bytes"""

        return self.key.to_string()

    @classmethod
    def from_wif(cls, wif: str) -> PrivateKey:
        """Creates key from WIFC or WIF format key"""

        return cls(wif=wif)

    @classmethod
    def from_bytes(cls, b: bytes, compressed: bool = True) -> PrivateKey:
        """Creates a key directly from 32 raw bytes"""

        return cls(b=b, compressed=compressed)

    @classmethod
    def from_hex(cls, hex_str: str, compressed: bool = True) -> PrivateKey:
        """Creates a key from a 64 character hex string"""

        try:
            b = h_to_b(hex_str)
        except ValueError:
            raise ValueError("Invalid private key: not a hex string")
        return cls(b=b, compressed=compressed)

    def _from_secret_exponent(self, secret_exponent: int) -> None:
        if not 1 <= secret_exponent < SECP256K1_ORDER:
            raise ValueError("Invalid private key: out of range")
        self.key = SigningKey.from_secret_exponent(secret_exponent, curve=SECP256k1)

    def _from_bytes(self, b: bytes) -> None:
        """Creates a key directly from 32 raw bytes"""

        if len(b) != 32:
            raise ValueError("Invalid key length: must be exactly 32 bytes.")
        self._from_secret_exponent(b_to_i(b))

    def _from_wif(self, wif: str) -> None:
        """Creates key from WIFC or WIF format key

        Check to_wif for the detailed process. From WIF is the reverse.

        Raises
        ------
        ValueError
            if the checksum or the network prefix is wrong
        """

        if not wif:
            raise ValueError("Invalid WIF: empty string")

        # decode base58check get key bytes plus checksum
        try:
            data_bytes = b58decode(wif.encode("utf-8"))
        except ValueError:
            raise ValueError("Invalid WIF: not base58 encoded")
        key_bytes = data_bytes[:-4]
        checksum = data_bytes[-4:]

        # verify key with checksum
        if checksum != hash256(key_bytes)[0:4]:
            raise ValueError("Checksum is wrong. Possible mistype?")

        network_prefix = key_bytes[:1]
        if network_prefix not in WIF_PREFIX_NETWORKS:
            raise ValueError("Unknown WIF network prefix")
        self.network = WIF_PREFIX_NETWORKS[network_prefix]

        # remove network prefix
        key_bytes = key_bytes[1:]

        # 33 bytes ending in 0x01 means the public key is compressed
        if len(key_bytes) == 33 and key_bytes[-1] == 0x01:
            self.compressed = True
            self._from_bytes(key_bytes[:-1])
        elif len(key_bytes) == 32:
            self.compressed = False
            self._from_bytes(key_bytes)
        else:
            raise ValueError("Invalid WIF payload length")

    def to_wif(self, compressed: bool = True, network: str = "mainnet") -> str:
        """Returns key in WIFC or WIF string

        |  Pseudocode:
        |      network_prefix = (1 byte version number)
        |      data = network_prefix + (32 bytes number/key) [ + 0x01 if compressed ]
        |      data_hash = SHA-256( SHA-256( data ) )
        |      checksum = (first 4 bytes of data_hash)
        |      wif = Base58CheckEncode( data + checksum )
        """

        # add network prefix to the key
        data = NETWORK_WIF_PREFIXES[network] + self.to_bytes()

        if compressed is True:
            data += b"\x01"

        checksum = hash256(data)[0:4]
        wif = b58encode(data + checksum)

        return wif.decode("utf-8")

    def sign_digest(self, tx_digest: bytes, sighash: int = SIGHASH_ALL) -> str:
        """Signs a transaction digest with the private key

        Bitcoin uses the normal DER format for transactions. Each input is
        signed separately; the digest already commits to the input index and
        the script code of the output being spent.

        Returns the DER signature with the sighash byte appended, as hex
        """

        # From Bitcoin core v0.17 a Low R value is required. This way
        # signatures are always 71 bytes. Because R is not mutable in the same
        # way that S is, a low R value can only be found by trying different
        # nonces (RFC6979 - deterministic nonce generation) by feeding
        # extra_entropy until R's top bit is clear.
        signature = self.key.sign_digest_deterministic(
            tx_digest, sigencode=sigencode_der, hashfunc=hashlib.sha256
        )
        r, s = sigdecode_der(signature, SECP256K1_ORDER)

        attempt = 1
        while i_to_b32(r)[0] >= 0x80:
            signature = self.key.sign_digest_deterministic(
                tx_digest,
                extra_entropy=i_to_b32(attempt),
                sigencode=sigencode_der,
                hashfunc=hashlib.sha256,
            )
            r, s = sigdecode_der(signature, SECP256K1_ORDER)
            attempt += 1

        # Low S standardness rule of BIP62: (r, order - s) is an equally
        # valid signature so only the lower of the two S values is accepted
        if s > SECP256K1_ORDER // 2:
            s = SECP256K1_ORDER - s

        signature = sigencode_der(r, s, SECP256K1_ORDER)

        # add sighash in the signature -- as one byte!
        signature += struct.pack("B", sighash)

        return b_to_h(signature)

    def get_public_key(self) -> PublicKey:
        """Returns the corresponding PublicKey"""

        return PublicKey.from_bytes(
            self.key.get_verifying_key().to_string("uncompressed")
        )

    def __repr__(self) -> str:
        # never expose key material
        return "PrivateKey(compressed=%s)" % self.compressed


class PublicKey:
    """Represents an ECDSA public key.

    Attributes
    ----------
    key : VerifyingKey
        the ecdsa verifying key over secp256k1

    Methods
    -------
    from_hex(hex_str)
        creates an object from a hex string in SEC format (classmethod)
    to_hex(compressed=True)
        returns the key as hex string (in SEC format - compressed by default)
    to_bytes()
        returns the key's raw 64 bytes (x, y)
    to_hash160(compressed=True)
        returns the hash160 hex string of the public key
    get_address(compressed=True, network="mainnet")
        returns the corresponding P2pkhAddress object
    verify_digest(signature, digest)
        checks a DER signature over a digest
    """

    def __init__(self, hex_str: str) -> None:
        """
        Parameters
        ----------
        hex_str : str
            the public key in SEC format (compressed or uncompressed)

        Raises
        ------
        ValueError
            if the key is not a valid point on secp256k1
        """
        hex_str = hex_str.strip()
        if hex_str.lower().startswith("0x"):
            hex_str = hex_str[2:]

        try:
            self.key = VerifyingKey.from_string(h_to_b(hex_str), curve=SECP256k1)
        except (ValueError, MalformedPointError) as e:
            raise ValueError("Invalid public key: %s" % e) from e

    @classmethod
    def from_hex(cls, hex_str: str) -> PublicKey:
        """Creates a public key from a hex string (SEC format)"""

        return cls(hex_str)

    @classmethod
    def from_bytes(cls, b: bytes) -> PublicKey:
        """Creates a public key from SEC bytes"""

        return cls(b_to_h(b))

    def to_bytes(self) -> bytes:
        """Returns key's bytes"""

        return self.key.to_string()

    def to_hex(self, compressed: bool = True) -> str:
        """Returns public key as a hex string (SEC format - compressed by
        default)"""

        encoding = "compressed" if compressed else "uncompressed"
        return b_to_h(self.key.to_string(encoding))

    def to_hash160(self, compressed: bool = True) -> str:
        """Returns the RIPEMD( SHA256( ) ) of the public key in hex"""

        return b_to_h(hash160(h_to_b(self.to_hex(compressed))))

    def get_address(
        self, compressed: bool = True, network: str = "mainnet"
    ) -> P2pkhAddress:
        """Returns the corresponding P2PKH Address (default compressed)"""

        return P2pkhAddress(hash160=self.to_hash160(compressed), network=network)

    def verify_digest(self, signature: bytes, digest: bytes) -> bool:
        """Returns True if the DER signature (without sighash byte) is valid
        for digest"""

        try:
            return self.key.verify_digest(signature, digest, sigdecode=sigdecode_der)
        except (BadSignatureError, UnexpectedDER):
            return False

    def __eq__(self, _other: object) -> bool:
        if not isinstance(_other, PublicKey):
            return False
        return self.to_bytes() == _other.to_bytes()

    def __repr__(self) -> str:
        return "PublicKey(%s)" % self.to_hex()


class Address(ABC):
    """Represents a base58check encoded Bitcoin address

    Attributes
    ----------
    hash160 : str
        the hash160 string representation of the address; hash160 represents
        two consequtive hashes of the public key or the redeam script, first
        a SHA-256 and then an RIPEMD-160
    network : str
        mainnet or testnet (regtest shares the testnet prefixes)

    Methods
    -------
    from_address(address)
        instantiates an object from address string encoding
    from_hash160(hash160_str, network)
        instantiates an object from a hash160 hex string
    to_string()
        returns the address's string encoding
    to_hash160()
        returns the address's hash160 hex string representation
    to_script_pub_key()
        returns the locking script paying to this address

    Raises
    ------
    TypeError
        No parameters passed
    ValueError
        If an invalid address or hash160 is provided.
    """

    _PREFIX_NETWORKS: dict[bytes, str] = {}

    @abstractmethod
    def __init__(
        self,
        address: Optional[str] = None,
        hash160: Optional[str] = None,
        script: Optional[Script] = None,
        network: str = "mainnet",
    ) -> None:
        self.network = network

        if hash160:
            if self._is_hash160_valid(hash160):
                self.hash160 = hash160.lower()
            else:
                raise ValueError("Invalid value for parameter hash160.")
        elif address:
            self.hash160 = self._address_to_hash160(address)
        elif script:
            if isinstance(script, Script):
                self.hash160 = b_to_h(hash160_of(script))
            else:
                raise TypeError("A Script class is required.")
        else:
            raise TypeError("A valid address or hash160 is required.")

    @classmethod
    def from_address(cls, address: str) -> Address:
        """Creates an address object from an address string"""

        return cls(address=address)

    @classmethod
    def from_hash160(cls, hash160: str, network: str = "mainnet") -> Address:
        """Creates an address object from a hash160 string"""

        return cls(hash160=hash160, network=network)

    def _address_to_hash160(self, address: str) -> str:
        """Base58CheckDecode the address, verify it and strip prefix and
        checksum. Sets the network from the version prefix."""

        digits_58_pattern = (
            r"[^123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz]"
        )
        if re.search(digits_58_pattern, address):
            raise ValueError("Invalid value for parameter address.")

        data_checksum = b58decode(address.encode("utf-8"))
        if len(data_checksum) != 25:
            raise ValueError("Invalid value for parameter address.")

        data = data_checksum[:-4]
        checksum = data_checksum[-4:]
        if hash256(data)[0:4] != checksum:
            raise ValueError("Invalid address checksum.")

        network_prefix = data[:1]
        if network_prefix not in self._PREFIX_NETWORKS:
            raise ValueError("Invalid address prefix for %s." % self.get_type())
        self.network = self._PREFIX_NETWORKS[network_prefix]

        return b_to_h(data[1:])

    def _is_hash160_valid(self, hash160: str) -> bool:
        """Checks is a hash160 hex string is valid"""

        # check the size -- should be 20 bytes, 40 characters in hexadecimal string
        if len(hash160) != 40:
            return False

        try:
            int(hash160, 16)
            return True
        except ValueError:
            return False

    @abstractmethod
    def _prefix(self) -> bytes:
        pass

    def to_hash160(self) -> str:
        """Returns as hash160 hex string"""

        return self.hash160

    @abstractmethod
    def get_type(self) -> str:
        """Returns the type of address"""

    def to_string(self) -> str:
        """Returns as address string

        |  Pseudocode:
        |      network_prefix = (1 byte version number)
        |      data = network_prefix + hash160_bytes
        |      data_hash = SHA-256( SHA-256( data ) )
        |      checksum = (first 4 bytes of data_hash)
        |      address_bytes = Base58CheckEncode( data + checksum )
        """
        data = self._prefix() + h_to_b(self.hash160)
        checksum = hash256(data)[0:4]
        address_bytes = b58encode(data + checksum)

        return address_bytes.decode("utf-8")

    @abstractmethod
    def to_script_pub_key(self) -> Script:
        pass

    def __repr__(self) -> str:
        return "%s(%s)" % (self.__class__.__name__, self.to_string())


class P2pkhAddress(Address):
    """Encapsulates a P2PKH address.

    Check Address class for details
    """

    _PREFIX_NETWORKS = P2PKH_PREFIX_NETWORKS

    def __init__(
        self,
        address: Optional[str] = None,
        hash160: Optional[str] = None,
        network: str = "mainnet",
    ) -> None:
        super().__init__(address=address, hash160=hash160, network=network)

    def _prefix(self) -> bytes:
        return NETWORK_P2PKH_PREFIXES[self.network]

    def to_script_pub_key(self) -> Script:
        """Returns the scriptPubKey (P2PKH) that corresponds to this address"""
        return Script(
            ["OP_DUP", "OP_HASH160", self.to_hash160(), "OP_EQUALVERIFY", "OP_CHECKSIG"]
        )

    def get_type(self) -> str:
        """Returns the type of address"""
        return P2PKH_ADDRESS


class P2shAddress(Address):
    """Encapsulates a P2SH address.

    Check Address class for details
    """

    _PREFIX_NETWORKS = P2SH_PREFIX_NETWORKS

    def __init__(
        self,
        address: Optional[str] = None,
        hash160: Optional[str] = None,
        script: Optional[Script] = None,
        network: str = "mainnet",
    ) -> None:
        super().__init__(address=address, hash160=hash160, script=script, network=network)

    @classmethod
    def from_script(cls, script: Script, network: str = "mainnet") -> P2shAddress:
        """Creates an address object from a redeem script"""

        return cls(script=script, network=network)

    def _prefix(self) -> bytes:
        return NETWORK_P2SH_PREFIXES[self.network]

    def to_script_pub_key(self) -> Script:
        """Returns the scriptPubKey (P2SH) that corresponds to this address"""
        return Script(["OP_HASH160", self.to_hash160(), "OP_EQUAL"])

    def get_type(self) -> str:
        """Returns the type of address"""
        return P2SH_ADDRESS


class SegwitAddress(ABC):
    """Represents a segwit v0 address, usable as a payment destination.

    Attributes
    ----------
    witness_program : str
        the witness program hex string
    network : str
        mainnet, testnet or regtest, from the human readable part

    Raises
    ------
    TypeError
        No parameters passed
    ValueError
        If an invalid address or witness program is provided.
    """

    _PROGRAM_SIZE = 0

    @abstractmethod
    def __init__(
        self,
        address: Optional[str] = None,
        witness_program: Optional[str] = None,
        network: str = "mainnet",
    ) -> None:
        self.network = network
        self.version = 0

        if witness_program:
            if len(witness_program) != 2 * self._PROGRAM_SIZE:
                raise ValueError("Invalid value for parameter witness_program.")
            self.witness_program = witness_program.lower()
        elif address:
            self.witness_program = self._address_to_hash(address)
        else:
            raise TypeError("A valid address or witness program is required.")

    @classmethod
    def from_address(cls, address: str) -> SegwitAddress:
        """Creates an address object from an address string"""

        return cls(address=address)

    def _address_to_hash(self, address: str) -> str:
        """Decodes a bech32 address and sets the network from its hrp"""

        for network, hrp in NETWORK_SEGWIT_PREFIXES.items():
            if not address.lower().startswith(hrp + "1"):
                continue
            witver, witprog = bech32.decode(hrp, address)
            if witver is None:
                break
            if witver != 0 or len(witprog) != self._PROGRAM_SIZE:
                raise ValueError("Invalid witness version or program size.")
            self.network = network
            return b_to_h(bytes(witprog))

        raise ValueError("Invalid value for parameter address.")

    def to_witness_program(self) -> str:
        """Returns the witness program hex string"""

        return self.witness_program

    def to_string(self) -> str:
        """Returns as bech32 address string"""

        hrp = NETWORK_SEGWIT_PREFIXES[self.network]
        return bech32.encode(hrp, self.version, h_to_b(self.witness_program))

    def to_script_pub_key(self) -> Script:
        """Returns the scriptPubKey (segwit v0) that corresponds to this address"""
        return Script(["OP_0", self.to_witness_program()])

    @abstractmethod
    def get_type(self) -> str:
        """Returns the type of address"""

    def __repr__(self) -> str:
        return "%s(%s)" % (self.__class__.__name__, self.to_string())


class P2wpkhAddress(SegwitAddress):
    """Encapsulates a P2WPKH address"""

    _PROGRAM_SIZE = 20

    def __init__(
        self,
        address: Optional[str] = None,
        witness_program: Optional[str] = None,
        network: str = "mainnet",
    ) -> None:
        super().__init__(address=address, witness_program=witness_program, network=network)

    def get_type(self) -> str:
        return P2WPKH_ADDRESS_V0


class P2wshAddress(SegwitAddress):
    """Encapsulates a P2WSH address"""

    _PROGRAM_SIZE = 32

    def __init__(
        self,
        address: Optional[str] = None,
        witness_program: Optional[str] = None,
        network: str = "mainnet",
    ) -> None:
        super().__init__(address=address, witness_program=witness_program, network=network)

    def get_type(self) -> str:
        return P2WSH_ADDRESS_V0


def hash160_of(script: Script) -> bytes:
    """RIPEMD160( SHA256( script ) ) - the hash committed to by P2SH"""
    return hash160(script.to_bytes())
