"""
Test suite for the resource API.

This package contains:
- unit/: Pagination, validation, model and service tests
- integration/: HTTP API tests through the Flask test client
"""
