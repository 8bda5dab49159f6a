"""
Chain - Transaction construction and network interaction for Ontology.

Provides ABI binding, transaction building and signing, submission,
block-height polling and a JSON-RPC transport.

Uses httpx + cryptography + rfc8785; no Ontology SDK required.
"""
