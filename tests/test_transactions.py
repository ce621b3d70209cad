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

from txbuilder.keys import PrivateKey, P2pkhAddress
from txbuilder.script import Script
from txbuilder.transactions import TxInput, TxOutput, Transaction
from txbuilder.utils import h_to_b


class TestLegacyTransaction(unittest.TestCase):
    maxDiff = None

    def setUp(self):
        self.txin = TxInput(
            "fb48f4e23bf6ddf606714141ac78c3e921c8c0bebeb7c8abb2c799e9ff96ce6c", 0
        )
        self.addr = P2pkhAddress("n4bkvTyU1dVdzsrhWBqBw8fEMbHjJvtmJR")
        self.txout = TxOutput(10000000, self.addr.to_script_pub_key())
        self.change_addr = P2pkhAddress("mytmhndz4UbEMeoSZorXXrLpPfeoFUDzEp")
        self.change_txout = TxOutput(
            29000000, self.change_addr.to_script_pub_key()
        )
        self.sk = PrivateKey("cRvyLwCPLU88jsyj94L7iJjQX5C2f8koG4G2gevN4BeSGcEvfKe9")
        self.from_addr = P2pkhAddress("myPAE9HwPeKHh8FjKwBNBaHnemApo3dw6e")

        self.core_tx_result = (
            "02000000016cce96ffe999c7b2abc8b7bebec0c821e9c378ac41417106f6ddf63be2f448fb"
            "0000000000ffffffff0280969800000000001976a914fd337ad3bf81e086d96a68e1f8d6a0"
            "a510f8c24a88ac4081ba01000000001976a914c992931350c9ba48538003706953831402ea"
            "34ea88ac00000000"
        )
        self.core_tx_signed_result = (
            "02000000016cce96ffe999c7b2abc8b7bebec0c821e9c378ac41417106f6ddf63be2f448fb"
            "000000006a473044022079dad1afef077fa36dcd3488708dd05ef37888ef550b45eb00cdb0"
            "4ba3fc980e02207a19f6261e69b604a92e2bffdf6ddbed0c64f55d5003e9dfb58b874b07ae"
            "f3d7012103a2fef1829e0742b89c218c51898d9e7cb9d51201ba2bf9d9e9214ebb6af32708"
            "ffffffff0280969800000000001976a914fd337ad3bf81e086d96a68e1f8d6a0a510f8c24a"
            "88ac4081ba01000000001976a914c992931350c9ba48538003706953831402ea34ea88ac00"
            "000000"
        )
        self.sighash_all = (
            "d61a1adae9bdd4a90162f5acd771e47eaf38a10abcbd0a54a34ec7dd69e4c4a7"
        )
        self.txid = "541104378a32b13def34dce753b9f8671652ecb4d95c98273a4ff8eeb7269d24"

    def _tx(self):
        return Transaction([self.txin], [self.txout, self.change_txout], version=2)

    def test_unsigned_tx_1_input_2_outputs(self):
        self.assertEqual(self._tx().to_hex(), self.core_tx_result)

    def test_default_version_and_locktime(self):
        tx_hex = Transaction([self.txin], [self.txout]).to_hex()
        self.assertTrue(tx_hex.startswith("01000000"))
        self.assertTrue(tx_hex.endswith("00000000"))

    def test_transaction_digest(self):
        tx = self._tx()
        digest = tx.get_transaction_digest(0, self.from_addr.to_script_pub_key())
        self.assertEqual(digest.hex(), self.sighash_all)
        # the transaction itself is left unsigned
        self.assertEqual(tx.to_hex(), self.core_tx_result)

    def test_signed_tx_1_input_2_outputs(self):
        tx = self._tx()
        digest = tx.get_transaction_digest(0, self.from_addr.to_script_pub_key())
        sig = self.sk.sign_digest(digest)
        pk = self.sk.get_public_key().to_hex()
        self.txin.script_sig = Script([sig, pk])
        self.assertEqual(tx.to_hex(), self.core_tx_signed_result)
        self.assertEqual(tx.get_txid(), self.txid)
        self.assertEqual(tx.get_size(), len(self.core_tx_signed_result) // 2)

    def test_digest_rejects_bad_index_and_sighash(self):
        tx = self._tx()
        script = self.from_addr.to_script_pub_key()
        self.assertRaises(IndexError, tx.get_transaction_digest, 1, script)
        self.assertRaises(ValueError, tx.get_transaction_digest, 0, script, 0x02)


class TestFromRaw(unittest.TestCase):
    def setUp(self):
        self.raw_signed = (
            "02000000016cce96ffe999c7b2abc8b7bebec0c821e9c378ac41417106f6ddf63be2f448fb"
            "000000006a473044022079dad1afef077fa36dcd3488708dd05ef37888ef550b45eb00cdb0"
            "4ba3fc980e02207a19f6261e69b604a92e2bffdf6ddbed0c64f55d5003e9dfb58b874b07ae"
            "f3d7012103a2fef1829e0742b89c218c51898d9e7cb9d51201ba2bf9d9e9214ebb6af32708"
            "ffffffff0280969800000000001976a914fd337ad3bf81e086d96a68e1f8d6a0a510f8c24a"
            "88ac4081ba01000000001976a914c992931350c9ba48538003706953831402ea34ea88ac00"
            "000000"
        )

    def test_from_raw(self):
        tx = Transaction.from_raw(self.raw_signed)
        self.assertEqual(tx.version, b"\x02\x00\x00\x00")
        self.assertEqual(len(tx.inputs), 1)
        self.assertEqual(
            tx.inputs[0].txid,
            "fb48f4e23bf6ddf606714141ac78c3e921c8c0bebeb7c8abb2c799e9ff96ce6c",
        )
        self.assertEqual(tx.inputs[0].txout_index, 0)
        self.assertEqual(
            tx.inputs[0].script_sig.get_script()[1],
            "03a2fef1829e0742b89c218c51898d9e7cb9d51201ba2bf9d9e9214ebb6af32708",
        )
        self.assertEqual([o.amount for o in tx.outputs], [10000000, 29000000])
        self.assertTrue(tx.outputs[1].script_pubkey.is_p2pkh())
        self.assertEqual(tx.to_hex(), self.raw_signed)

    def test_from_raw_bytes(self):
        tx = Transaction.from_raw(h_to_b(self.raw_signed))
        self.assertEqual(tx.to_hex(), self.raw_signed)

    def test_truncated(self):
        self.assertRaises(ValueError, Transaction.from_raw, self.raw_signed[:-10])

    def test_trailing_data(self):
        self.assertRaises(ValueError, Transaction.from_raw, self.raw_signed + "00")

    def test_segwit_rejected(self):
        self.assertRaises(ValueError, Transaction.from_raw, "020000000001" + "00" * 10)


class TestTxParts(unittest.TestCase):
    def test_output_amount_checks(self):
        script = Script(["OP_1"])
        self.assertRaises(TypeError, TxOutput, 0.5, script)
        self.assertRaises(TypeError, TxOutput, True, script)
        self.assertRaises(ValueError, TxOutput, -1, script)
        self.assertEqual(TxOutput(2**64 - 1, script).to_bytes()[:8], b"\xff" * 8)

    def test_input_serialization(self):
        txin = TxInput("00" * 31 + "01", 3, sequence=0xFFFFFFFE)
        self.assertEqual(
            txin.to_bytes().hex(), "01" + "00" * 31 + "03000000" + "00" + "feffffff"
        )

    def test_copy_is_deep(self):
        txin = TxInput("11" * 32, 0, Script(["OP_1"]))
        tx = Transaction([txin], [TxOutput(1, Script(["OP_1"]))])
        tx_copy = Transaction.copy(tx)
        tx_copy.inputs[0].script_sig.script.append("OP_2")
        self.assertEqual(tx.inputs[0].script_sig.get_script(), ["OP_1"])


if __name__ == "__main__":
    unittest.main()
