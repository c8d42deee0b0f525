"""Infrastructure layer for uploads app.

This package contains everything that touches the local filesystem
without making decisions about it:
- Upload type configuration and path resolution
- Directory tree snapshots

Keep infrastructure concerns separate from business logic.
"""
