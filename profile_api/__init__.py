"""
Top-level package for the Developer Profile API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
