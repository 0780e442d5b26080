"""Unit tests for pagination, validation, models and services."""
