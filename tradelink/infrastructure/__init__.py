"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. This is where the database,
cryptography and the upstream trading API integration live.
"""
