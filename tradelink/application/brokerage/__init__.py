"""
Application layer for the brokerage bounded context.

Use cases coordinate domain services and ports to fulfill
brokerage operations. No framework or infrastructure imports allowed.
"""
