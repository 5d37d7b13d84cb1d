"""
Vendor directory snapshot adapter.

Responsibilities:
- Locate the host's exported vendor directory (JSON or CSV).
- Normalize loosely shaped host records into Vendor models.
- Keep the loaded snapshot in memory until explicitly cleared.
"""
