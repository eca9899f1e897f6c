"""
Brokerage bounded context: domain layer.

This module contains all domain logic for the brokerage context:
- Credential pairs and connection status
- Canonical request strings and key normalisation
- Upstream error translation
- Connection verification and the signed request gateway
"""
