"""
Signing module - key material and digital signatures.

This module handles:
- KeyPair value object
- SignatureScheme capability interface (sign, verify, serialize, parse)
- RSA PKCS#1 v1.5 and ECDSA P-256 schemes
- PEM-armored key storage on disk
"""
