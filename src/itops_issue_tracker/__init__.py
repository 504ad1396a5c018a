"""ItOps Issue Tracker.

A small in-memory issue tracker:
- a fixed user directory
- an enforced issue status lifecycle
- a lock-guarded issue store
- a FastAPI REST surface
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
