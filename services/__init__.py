"""
Service layer for business logic.

This package contains service classes that resolve per-document
options and run the parse and render pipeline over documents.
"""
