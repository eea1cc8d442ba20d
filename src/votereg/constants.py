"""
Cardano ledger and vote registration constants.

Witness sizes follow the shape-based fee estimate used by the Cardano node
tooling: each witness is accounted for as a small CBOR array holding a
32-byte key and a 64-byte signature, each behind a 2-byte bytestring head.
"""

from __future__ import annotations

# Network magics
MAINNET_MAGIC = 764824073
TESTNET_MAGIC = 1097911063

# Shelley address network tags (low nibble of the header byte)
MAINNET_ADDRESS_TAG = 1
TESTNET_ADDRESS_TAG = 0

# Base address with key payment credential and key stake credential
BASE_ADDRESS_KEY_KEY = 0b0000

# Hash sizes (blake2b)
KEY_HASH_SIZE = 28  # blake2b-224, verification key hashes
TX_ID_SIZE = 32  # blake2b-256, transaction ids and metadata hashes

# Ed25519 key material
SEED_SIZE = 32
VERIFICATION_KEY_SIZE = 32
SIGNATURE_SIZE = 64
CHAIN_CODE_SIZE = 32

# Witness size accounting (bytes)
SMALL_ARRAY_SIZE = 1
KEY_OBJ_SIZE = 2 + VERIFICATION_KEY_SIZE
SIG_OBJ_SIZE = 2 + SIGNATURE_SIZE
CHAIN_CODE_OBJ_SIZE = 2 + CHAIN_CODE_SIZE
SHELLEY_WITNESS_SIZE = SMALL_ARRAY_SIZE + KEY_OBJ_SIZE + SIG_OBJ_SIZE  # 101 bytes

# Byron address attributes: empty map on mainnet, network magic elsewhere
BYRON_ATTRIBUTES_SIZE_MAINNET = 1
BYRON_ATTRIBUTES_SIZE_TESTNET = 8

# Vote registration metadata labels
VOTE_REGISTRATION_LABEL = 61284
VOTE_SIGNATURE_LABEL = 61285

# Transaction metadata limits
METADATA_MAX_BYTES_LENGTH = 64
METADATA_MAX_TEXT_LENGTH = 64
METADATA_MAX_LABEL = 2**64 - 1

# Fee probing
MOCK_TTL = 1
MOCK_TX_IN_INDEX = 1
