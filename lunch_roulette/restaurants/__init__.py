"""
Restaurant list management.

Responsibilities:
- Pure list operations (add, remove, toggle, resets, bulk delete, cooldown).
- Request and response bodies for the list endpoints.
"""
