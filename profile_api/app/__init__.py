"""
Application package.

``main`` assembles the FastAPI app; ``core`` holds configuration,
database access, security and error handling; ``services`` contains
the SQL for each domain and ``api`` the versioned HTTP routes.
"""

from .main import app  # noqa: F401
