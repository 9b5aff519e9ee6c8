"""
Note editing boundary for the notes backend.

Design intent:
- Route accepted AI suggestions by kind (writing/task/structure).
- Compose load, extract, merge and persist into one editor cycle.
"""
