"""
Routes package for the resource API.

This package contains route blueprints:
- api: REST API endpoints for users and tasks
"""
