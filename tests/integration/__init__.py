"""
API test package for the resource API.

This package contains tests for the REST API endpoints.
Tests use the Flask test client and demonstrate:
- CRUD operation testing
- Pagination and filtering
- Input validation testing
- Error handling testing
"""
