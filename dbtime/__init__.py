"""
DB Time Service: Package Initializer
======================================

What: Marks the `dbtime` directory as a Python package.
Who:  Imported by uvicorn (`uvicorn dbtime.main:app`), the `dbtime` console
      script, and pytest.

Layout:
    ┌─────────────────────────────────────┐
    │        Routes (HTTP Listener)       │  ← GET / only
    ├─────────────────────────────────────┤
    │      Database Client (Pool)         │  ← scoped execute()
    ├─────────────────────────────────────┤
    │       Config & Exceptions           │  ← Settings, DatabaseError
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
