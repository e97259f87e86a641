"""BLAKE3 Merkle roots, Ed25519 signature checks and key storage."""