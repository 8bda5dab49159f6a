"""
Keys - Wallet files and key material.

Account keys are P-256 ECDSA keys stored encrypted (scrypt + AES-256-GCM)
in Ontology wallet files.
"""
