"""
NoteGenius backend package.

Design intent:
- Host the notes service behind a thin FastAPI surface.
- Keep domain modules (content/note/suggest) independent from the HTTP layer.
"""
