"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - storage: File storage abstraction (local filesystem, in-memory, S3)
    - uploads: Multipart image upload validation and storing
    - container: Service locator wiring infrastructure into the catalog services

This package enables:
    - Easy testing with the in-memory storage backend
    - Switching between providers without code changes
"""
