"""Transaction receipt strings.

Receipts are opaque ``0x``-prefixed hex strings in the shape of a ledger
transaction hash. They are random and are not derived from any chain.
"""

import secrets

TX_HASH_BYTES = 32


def generate_tx_hash() -> str:
    return "0x" + secrets.token_hex(TX_HASH_BYTES)
