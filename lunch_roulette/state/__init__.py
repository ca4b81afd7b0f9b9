"""
Shared state document.

Responsibilities:
- Define the Restaurant and ServerState schema and its camelCase wire format.
- Sanitize raw input into a valid document on every read and write.
- Persist the single document wholesale (last writer wins).
"""
