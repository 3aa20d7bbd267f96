"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- persistence/: Database models, session management, token repository
- audit/: Download attempt trail (PostgreSQL)
- security/: Download token sources and generation service
- ip_lookup/: Public IP lookup services with fallback
- logging/: structlog adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
