"""Test suite for the secure downloads service.

Test structure follows the test pyramid:
- unit/: Unit tests - domain rules and handlers with fakes or mocks
- integration/: Integration tests - SQLAlchemy adapters against PostgreSQL
- smoke/: Smoke tests - the full link lifecycle end to end
"""
