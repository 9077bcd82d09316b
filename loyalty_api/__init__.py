"""
Top-level package for the LY loyalty API.

All functionality lives in submodules under ``app``; import the ASGI
application as ``loyalty_api.app.main:app``.
"""

__all__ = []
