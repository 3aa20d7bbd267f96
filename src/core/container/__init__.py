"""Container module - Centralized dependency injection.

Composition root for the secure downloads service. Every collaborator is
built here and passed to handlers explicitly; nothing else reaches for a
global datastore handle.

    from src.core.container import get_logger, get_verify_download_token_handler

The container is organized into modules:
- infrastructure: Core services (database, sessions, logging, IP lookup)
- repositories: Repository factories
- download_handlers: Secure download handler factories
"""

# Infrastructure services
from src.core.container.infrastructure import (
    get_audit_session,
    get_database,
    get_db_session,
    get_download_audit,
    get_ip_lookup,
    get_logger,
)

# Repositories
from src.core.container.repositories import get_download_token_repository

# Secure download handlers
from src.core.container.download_handlers import (
    get_cleanup_expired_tokens_handler,
    get_download_statistics_handler,
    get_download_token_handler,
    get_download_token_service,
    get_generate_download_tokens_handler,
    get_list_download_attempts_handler,
    get_request_new_download_links_handler,
    get_revoke_download_token_handler,
    get_verify_download_token_handler,
)

__all__ = [
    # Infrastructure
    "get_audit_session",
    "get_database",
    "get_db_session",
    "get_download_audit",
    "get_ip_lookup",
    "get_logger",
    # Repositories
    "get_download_token_repository",
    # Secure download handlers
    "get_cleanup_expired_tokens_handler",
    "get_download_statistics_handler",
    "get_download_token_handler",
    "get_download_token_service",
    "get_generate_download_tokens_handler",
    "get_list_download_attempts_handler",
    "get_request_new_download_links_handler",
    "get_revoke_download_token_handler",
    "get_verify_download_token_handler",
]
