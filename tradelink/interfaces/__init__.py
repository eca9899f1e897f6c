"""
Interfaces layer package.

FastAPI routers, Pydantic schemas and dependency wiring.
Routes delegate to use cases and contain no business logic.
"""
