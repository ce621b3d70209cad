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
