"""Business logic layer for uploads app.

This package contains the subdirectory lifecycle of upload types:
- Create, rename and remove subdirectories
- Move subdirectory data between upload types

Every operation returns an ``OperationResult`` instead of raising,
views only translate results into messages.
"""
