"""FastAPI server adapter for the issue tracker.

Design intent:
- Keep business logic in `itops_issue_tracker.tracker.*`
- Keep server-specific concerns (routing, CORS, error rendering) here
"""

from __future__ import annotations

__all__ = ["create_app"]

from itops_issue_tracker.server.app import create_app
