"""
AI suggestion source for the notes backend.

Design intent:
- Build one prompt per suggestion kind (writing/task/structure).
- Run a local model and return `{suggestion, confidence}` without raising.
"""
