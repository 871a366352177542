from unittest import TestCase

from eth_account import Account
from eth_utils import keccak
from hexbytes import HexBytes
from safe_eth.eth.utils import fast_keccak
from safe_eth.safe.enums import SafeOperationEnum

from ..constants import (
    DOMAIN_SEPARATOR_TYPE,
    DOMAIN_SEPARATOR_TYPEHASH,
    SAFE_TX_TYPE,
    SAFE_TX_TYPEHASH,
)
from ..eip712 import (
    encode_safe_tx_struct,
    get_domain_separator,
    get_safe_tx_hash,
    get_safe_tx_hash_preimage,
    get_safe_tx_struct_hash,
)
from ..models import MetaTransactionData, SafeTransactionData
from .factories import SafeTransactionDataFactory


class TestEip712(TestCase):
    def setUp(self):
        self.safe_address = Account.create().address
        self.safe_tx = SafeTransactionDataFactory()

    def test_typehashes(self):
        self.assertEqual(
            HexBytes(SAFE_TX_TYPEHASH),
            HexBytes(
                "0xbb8310d486368db6bd6f849402fdd73ad53d316b5a4b2644ad6efe0f941286d8"
            ),
        )
        self.assertEqual(
            HexBytes(DOMAIN_SEPARATOR_TYPEHASH),
            HexBytes(
                "0x47e79534a245952e8b16893a336b85a3d9ea9fa8c573f3d803afb92a79469218"
            ),
        )
        self.assertEqual(SAFE_TX_TYPEHASH, keccak(text=SAFE_TX_TYPE))
        self.assertEqual(DOMAIN_SEPARATOR_TYPEHASH, keccak(text=DOMAIN_SEPARATOR_TYPE))

    def test_encode_safe_tx_struct(self):
        encoded = encode_safe_tx_struct(self.safe_tx)
        self.assertEqual(len(encoded), 11 * 32)
        self.assertEqual(encoded[:32], SAFE_TX_TYPEHASH)
        self.assertEqual(encoded[96:128], fast_keccak(self.safe_tx.data))
        self.assertEqual(
            int.from_bytes(encoded[-32:], byteorder="big"), self.safe_tx.nonce
        )
        self.assertEqual(get_safe_tx_struct_hash(self.safe_tx), fast_keccak(encoded))

    def test_get_safe_tx_hash_preimage(self):
        preimage = get_safe_tx_hash_preimage(self.safe_tx, self.safe_address, 1)
        self.assertEqual(len(preimage), 66)
        self.assertEqual(preimage[:2], b"\x19\x01")
        self.assertEqual(preimage[2:34], get_domain_separator(1, self.safe_address))
        self.assertEqual(preimage[34:], get_safe_tx_struct_hash(self.safe_tx))

    def test_get_safe_tx_hash(self):
        safe_tx_hash = get_safe_tx_hash(self.safe_tx, self.safe_address, 1)
        self.assertEqual(len(safe_tx_hash), 32)
        # Deterministic
        self.assertEqual(
            safe_tx_hash, get_safe_tx_hash(self.safe_tx, self.safe_address, 1)
        )
        self.assertEqual(
            safe_tx_hash,
            fast_keccak(get_safe_tx_hash_preimage(self.safe_tx, self.safe_address, 1)),
        )

        # Domain is part of the hash
        self.assertNotEqual(
            safe_tx_hash, get_safe_tx_hash(self.safe_tx, self.safe_address, 100)
        )
        self.assertNotEqual(
            safe_tx_hash, get_safe_tx_hash(self.safe_tx, Account.create().address, 1)
        )

        # Every field is part of the hash
        other_safe_tx = SafeTransactionData(
            self.safe_tx.meta_tx, self.safe_tx.nonce + 1, self.safe_tx.gas
        )
        self.assertNotEqual(
            safe_tx_hash, get_safe_tx_hash(other_safe_tx, self.safe_address, 1)
        )

    def test_get_safe_tx_hash_defaults(self):
        to = Account.create().address
        # Missing operation is encoded as `CALL`
        self.assertEqual(
            get_safe_tx_hash(
                SafeTransactionData(MetaTransactionData(to, 1), 0),
                self.safe_address,
                1,
            ),
            get_safe_tx_hash(
                SafeTransactionData(
                    MetaTransactionData(to, 1, operation=SafeOperationEnum.CALL), 0
                ),
                self.safe_address,
                1,
            ),
        )
        # Missing data is encoded as empty bytes
        self.assertEqual(
            get_safe_tx_hash(
                SafeTransactionData(MetaTransactionData(to, 1, None), 0),
                self.safe_address,
                1,
            ),
            get_safe_tx_hash(
                SafeTransactionData(MetaTransactionData(to, 1, b""), 0),
                self.safe_address,
                1,
            ),
        )
        self.assertNotEqual(
            get_safe_tx_hash(
                SafeTransactionData(MetaTransactionData(to, 1), 0),
                self.safe_address,
                1,
            ),
            get_safe_tx_hash(
                SafeTransactionData(
                    MetaTransactionData(
                        to, 1, operation=SafeOperationEnum.DELEGATE_CALL
                    ),
                    0,
                ),
                self.safe_address,
                1,
            ),
        )
