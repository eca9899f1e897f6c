"""Brokerage adapters: request signer, upstream client, credential storage."""
