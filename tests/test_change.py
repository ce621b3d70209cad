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

from txbuilder.change import ChangeCalculator
from txbuilder.errors import InsufficientFundsError
from txbuilder.models import Utxo
from txbuilder.script import Script
from txbuilder.selection import Selection


class TestChangeCalculator(unittest.TestCase):
    def setUp(self):
        self.utxo = Utxo(txid="ab" * 32, vout=0, value=50000)
        self.target_script = Script(["OP_HASH160", "a9974100aeee974a20cda9a2f545704a0ab54fdc", "OP_EQUAL"])
        self.change_script = Script(
            ["OP_DUP", "OP_HASH160", "11" * 20, "OP_EQUALVERIFY", "OP_CHECKSIG"]
        )

    def _selection(self, fee=1000):
        return Selection(utxos=(self.utxo,), total=50000, fee=fee)

    def test_change_output(self):
        outputs = ChangeCalculator().build_outputs(
            self._selection(), 30000, self.target_script, self.change_script
        )
        self.assertEqual(len(outputs), 2)
        self.assertEqual(outputs[0].amount, 30000)
        self.assertEqual(outputs[0].script_pubkey, self.target_script)
        self.assertEqual(outputs[1].amount, 19000)
        self.assertEqual(outputs[1].script_pubkey, self.change_script)

    def test_no_change_when_exact(self):
        outputs = ChangeCalculator().build_outputs(
            self._selection(), 49000, self.target_script, self.change_script
        )
        self.assertEqual(len(outputs), 1)
        self.assertEqual(outputs[0].amount, 49000)

    def test_dust_threshold(self):
        calculator = ChangeCalculator(dust_threshold=546)
        outputs = calculator.build_outputs(
            self._selection(), 48500, self.target_script, self.change_script
        )
        self.assertEqual(len(outputs), 1)
        outputs = calculator.build_outputs(
            self._selection(), 48454, self.target_script, self.change_script
        )
        self.assertEqual(outputs[1].amount, 546)

    def test_compute_change(self):
        self.assertEqual(ChangeCalculator().compute_change(self._selection(), 30000), 19000)
        self.assertRaises(
            InsufficientFundsError,
            ChangeCalculator().compute_change,
            self._selection(),
            49500,
        )

    def test_invalid_threshold(self):
        self.assertRaises(ValueError, ChangeCalculator, -1)


if __name__ == "__main__":
    unittest.main()
