"""
Cooldown-aware random selection.

Responsibilities:
- Work out which restaurants are eligible right now.
- Pick one of them uniformly at random.
- Stamp the pick so it sits out the cooldown window.
"""
