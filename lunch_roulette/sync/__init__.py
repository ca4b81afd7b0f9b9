"""
Pull-based synchronization with the state API.

Responsibilities:
- Fetch the shared document and push full replacements back.
- Map HTTP failures onto the roulette error types.
"""
