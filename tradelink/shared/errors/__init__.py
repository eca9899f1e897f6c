"""
Error-to-HTTP mapping.

Domain and gateway errors raised by use cases are turned into
ErrorResponse bodies here, never inside routers.
"""
