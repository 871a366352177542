from safe_eth.eth.utils import fast_keccak_text

SAFE_TX_TYPE = (
    "SafeTx(address to,uint256 value,bytes data,uint8 operation,uint256 safeTxGas,"
    "uint256 baseGas,uint256 gasPrice,address gasToken,address refundReceiver,uint256 nonce)"
)
DOMAIN_SEPARATOR_TYPE = "EIP712Domain(uint256 chainId,address verifyingContract)"

# 0xbb8310d486368db6bd6f849402fdd73ad53d316b5a4b2644ad6efe0f941286d8
SAFE_TX_TYPEHASH: bytes = fast_keccak_text(SAFE_TX_TYPE)
# 0x47e79534a245952e8b16893a336b85a3d9ea9fa8c573f3d803afb92a79469218
DOMAIN_SEPARATOR_TYPEHASH: bytes = fast_keccak_text(DOMAIN_SEPARATOR_TYPE)

EIP712_PREFIX = b"\x19\x01"
SIGNATURE_LENGTH = 65
