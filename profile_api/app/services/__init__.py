"""
Service layer.

Each service encapsulates the SQL for one domain so the API handlers
stay limited to authentication, validation and response shaping.
"""
