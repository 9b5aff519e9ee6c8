"""
API orchestration boundary for the notes backend.

Design intent:
- Expose thin, typed endpoints for category/note/task/suggestion flows.
- Keep request validation explicit and failure modes predictable.
- Orchestrate modules without embedding domain logic in routers.
"""
