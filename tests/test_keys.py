# Copyright (C) 2025-2026 The bitcoin-txbuilder developers
#
# This file is part of bitcoin-txbuilder
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of bitcoin-txbuilder, including this file, may be copied,
# modified, propagated, or distributed except according to the terms contained
# in the LICENSE file.


import unittest

from txbuilder.keys import (
    PrivateKey,
    PublicKey,
    P2pkhAddress,
    P2shAddress,
    P2wpkhAddress,
    P2wshAddress,
)
from txbuilder.script import Script
from txbuilder.constants import SECP256K1_ORDER
from txbuilder.utils import hash256, h_to_b


class TestPrivateKeys(unittest.TestCase):
    def setUp(self):
        self.key_wifc = "KwDiBf89QgGbjEhKnhXJuH7LrciVrZi3qYjgd9M7rFU73sVHnoWn"
        self.key_wif = "5HpHagT65TZzG1PH3CSu63k8DbpvD8s5ip4nEB3kEsreAnchuDf"
        self.key_bytes = b"\x00" * 31 + b"\x01"
        self.testnet_wif = "cRvyLwCPLU88jsyj94L7iJjQX5C2f8koG4G2gevN4BeSGcEvfKe9"
        self.testnet_key_hex = (
            "81c70e36ffa5e3e6425dc19c7c35315d3d72dc60b79cb78fe009a335de29dd22"
        )

    def test_wif_creation(self):
        p = PrivateKey(self.key_wifc)
        self.assertEqual(p.to_bytes(), self.key_bytes)
        self.assertTrue(p.compressed)
        self.assertEqual(p.network, "mainnet")
        self.assertEqual(p.to_wif(compressed=False), self.key_wif)

    def test_uncompressed_wif(self):
        p = PrivateKey.from_wif(self.key_wif)
        self.assertEqual(p.to_bytes(), self.key_bytes)
        self.assertFalse(p.compressed)

    def test_exponent_creation(self):
        p = PrivateKey(secret_exponent=1)
        self.assertEqual(p.to_bytes(), self.key_bytes)
        self.assertEqual(p.to_wif(), self.key_wifc)

    def test_testnet_wif(self):
        p = PrivateKey.from_wif(self.testnet_wif)
        self.assertEqual(p.network, "testnet")
        self.assertEqual(p.to_bytes().hex(), self.testnet_key_hex)
        self.assertEqual(p.to_wif(network="testnet"), self.testnet_wif)

    def test_hex_creation(self):
        p = PrivateKey.from_hex(self.testnet_key_hex)
        self.assertEqual(p.to_wif(network="testnet"), self.testnet_wif)

    def test_out_of_range(self):
        self.assertRaises(ValueError, PrivateKey, secret_exponent=0)
        self.assertRaises(ValueError, PrivateKey, secret_exponent=SECP256K1_ORDER)
        self.assertRaises(ValueError, PrivateKey.from_bytes, b"\x00" * 32)
        self.assertRaises(ValueError, PrivateKey.from_bytes, b"\x01" * 31)

    def test_empty_wif(self):
        self.assertRaises(ValueError, PrivateKey, wif="")
        self.assertRaises(ValueError, PrivateKey.from_wif, "")

    def test_bad_wif_checksum(self):
        self.assertRaises(ValueError, PrivateKey.from_wif, self.key_wifc[:-1] + "o")

    def test_repr_hides_key(self):
        p = PrivateKey.from_hex(self.testnet_key_hex)
        self.assertNotIn(self.testnet_key_hex, repr(p))


class TestPublicKeys(unittest.TestCase):
    def setUp(self):
        self.public_key_hexc = (
            "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
        )
        self.public_key_hex = (
            "0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
            "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
        )
        self.address = "1EHNa6Q4Jz2uvNExL497mE43ikXhwF6kZm"
        self.addressc = "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"

    def test_pubkey_creation(self):
        pub1 = PublicKey(self.public_key_hex)
        pub2 = PublicKey(self.public_key_hexc)
        self.assertEqual(pub1, pub2)
        self.assertEqual(pub1.to_hex(), self.public_key_hexc)
        self.assertEqual(pub2.to_hex(compressed=False), self.public_key_hex)

    def test_from_private_key(self):
        pub = PrivateKey(secret_exponent=1).get_public_key()
        self.assertEqual(pub.to_hex(), self.public_key_hexc)

    def test_addresses(self):
        pub = PublicKey.from_hex(self.public_key_hexc)
        self.assertEqual(pub.get_address().to_string(), self.addressc)
        self.assertEqual(pub.get_address(compressed=False).to_string(), self.address)
        self.assertEqual(pub.to_hash160(), "751e76e8199196d454941c45d1b3a323f1433bd6")

    def test_testnet_address(self):
        priv = PrivateKey("cTALNpTpRbbxTCJ2A5Vq88UxT44w1PE2cYqiB3n4hRvzyCev1Wwo")
        pub = priv.get_public_key()
        self.assertEqual(
            pub.to_hex(),
            "02d82c9860e36f15d7b72aa59e29347f951277c21cd4d34822acdeeadbcff8a546",
        )
        self.assertEqual(
            pub.get_address(network="testnet").to_string(),
            "n4bkvTyU1dVdzsrhWBqBw8fEMbHjJvtmJR",
        )

    def test_invalid_pubkey(self):
        self.assertRaises(ValueError, PublicKey, "05" + "11" * 32)
        self.assertRaises(ValueError, PublicKey, "zz")


class TestSignDigest(unittest.TestCase):
    def setUp(self):
        self.priv = PrivateKey("cRvyLwCPLU88jsyj94L7iJjQX5C2f8koG4G2gevN4BeSGcEvfKe9")
        self.pub = self.priv.get_public_key()
        self.digest = hash256(b"txbuilder")

    def test_deterministic(self):
        self.assertEqual(
            self.priv.sign_digest(self.digest), self.priv.sign_digest(self.digest)
        )

    def test_low_r_low_s_and_verify(self):
        signature = h_to_b(self.priv.sign_digest(self.digest))
        # DER: 30 len 02 rlen r 02 slen s, then the sighash byte
        self.assertEqual(signature[0], 0x30)
        self.assertEqual(signature[-1], 0x01)
        der = signature[:-1]
        r_len = der[3]
        self.assertLessEqual(r_len, 32)
        s_len = der[5 + r_len]
        s = int.from_bytes(der[6 + r_len : 6 + r_len + s_len], "big")
        self.assertLessEqual(s, SECP256K1_ORDER // 2)
        self.assertTrue(self.pub.verify_digest(der, self.digest))

    def test_verify_rejects_other_digest(self):
        der = h_to_b(self.priv.sign_digest(self.digest))[:-1]
        self.assertFalse(self.pub.verify_digest(der, hash256(b"other")))
        self.assertFalse(self.pub.verify_digest(b"\x30\x00", self.digest))


class TestP2pkhAddresses(unittest.TestCase):
    def setUp(self):
        self.hash160 = "91b24bf9f5288532960ac687abb035127b1d28a5"
        self.hash160c = "751e76e8199196d454941c45d1b3a323f1433bd6"
        self.address = "1EHNa6Q4Jz2uvNExL497mE43ikXhwF6kZm"
        self.addressc = "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"

    def test_creation_hash(self):
        a1 = P2pkhAddress.from_hash160(self.hash160)
        self.assertEqual(a1.to_string(), self.address)
        a2 = P2pkhAddress.from_hash160(self.hash160c)
        self.assertEqual(a2.to_string(), self.addressc)

    def test_creation_address(self):
        a1 = P2pkhAddress.from_address(self.address)
        self.assertEqual(a1.to_hash160(), self.hash160)
        self.assertEqual(a1.network, "mainnet")

    def test_testnet_address(self):
        addr = P2pkhAddress("myPAE9HwPeKHh8FjKwBNBaHnemApo3dw6e")
        self.assertEqual(addr.network, "testnet")
        self.assertEqual(addr.to_hash160(), "c3f8e5b0f8455a2b02c29c4488a550278209b669")
        self.assertEqual(addr.to_string(), "myPAE9HwPeKHh8FjKwBNBaHnemApo3dw6e")
        self.assertEqual(
            addr.to_script_pub_key().to_hex(),
            "76a914c3f8e5b0f8455a2b02c29c4488a550278209b66988ac",
        )

    def test_invalid_addresses(self):
        self.assertRaises(ValueError, P2pkhAddress, self.addressc[:-1] + "J")
        self.assertRaises(ValueError, P2pkhAddress, "2MvzN3FntupGqY66FuGzoK9HFXqPFyMxfVU")
        self.assertRaises(ValueError, P2pkhAddress, "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAM0")
        self.assertRaises(TypeError, P2pkhAddress)


class TestP2shAddresses(unittest.TestCase):
    def setUp(self):
        self.redeem_script = Script.from_raw(
            "2103a2fef1829e0742b89c218c51898d9e7cb9d51201ba2bf9d9e9214ebb6af32708ac"
        )
        self.testnet_address = "2MvzN3FntupGqY66FuGzoK9HFXqPFyMxfVU"
        self.mainnet_address = "35S9yWrsJMmVLJTiE9NvhCHzKVB6En7h6a"

    def test_p2sh_creation(self):
        addr = P2shAddress.from_script(self.redeem_script, network="testnet")
        self.assertEqual(addr.to_string(), self.testnet_address)
        addr = P2shAddress.from_script(self.redeem_script)
        self.assertEqual(addr.to_string(), self.mainnet_address)

    def test_p2sh_from_address(self):
        addr = P2shAddress(self.testnet_address)
        self.assertEqual(addr.network, "testnet")
        self.assertEqual(addr.to_hash160(), "2910fc0b1b7ab6c9789c5a67c22c5bcde5b90390")
        self.assertEqual(
            addr.to_script_pub_key(), self.redeem_script.to_p2sh_script_pub_key()
        )

    def test_p2pkh_prefix_rejected(self):
        self.assertRaises(ValueError, P2shAddress, "n4bkvTyU1dVdzsrhWBqBw8fEMbHjJvtmJR")


class TestSegwitAddresses(unittest.TestCase):
    def test_p2wpkh(self):
        addr = P2wpkhAddress("bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4")
        self.assertEqual(addr.network, "mainnet")
        self.assertEqual(
            addr.to_witness_program(), "751e76e8199196d454941c45d1b3a323f1433bd6"
        )
        self.assertEqual(
            addr.to_script_pub_key().to_hex(),
            "0014751e76e8199196d454941c45d1b3a323f1433bd6",
        )
        self.assertEqual(addr.to_string(), "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t4")

    def test_p2wpkh_uppercase_and_regtest(self):
        addr = P2wpkhAddress("BC1QW508D6QEJXTDG4Y5R3ZARVARY0C5XW7KV8F3T4")
        self.assertEqual(addr.network, "mainnet")
        addr = P2wpkhAddress("bcrt1qw508d6qejxtdg4y5r3zarvary0c5xw7kygt080")
        self.assertEqual(addr.network, "regtest")

    def test_p2wsh(self):
        addr = P2wshAddress(
            "tb1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3q0sl5k7"
        )
        self.assertEqual(addr.network, "testnet")
        self.assertEqual(
            addr.to_witness_program(),
            "1863143c14c5166804bd19203356da136c985678cd4d27a1b8c6329604903262",
        )

    def test_wrong_program_size(self):
        self.assertRaises(
            ValueError,
            P2wpkhAddress,
            "tb1qrp33g0q5c5txsp9arysrx4k6zdkfs4nce4xj0gdcccefvpysxf3q0sl5k7",
        )

    def test_bad_checksum(self):
        self.assertRaises(
            ValueError, P2wpkhAddress, "bc1qw508d6qejxtdg4y5r3zarvary0c5xw7kv8f3t5"
        )


if __name__ == "__main__":
    unittest.main()
