"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Resource errors (*_NOT_FOUND)
- Download token errors (TOKEN_*, DOWNLOAD_*)
- Audit trail errors (AUDIT_*)
- Infrastructure passthrough (EXTERNAL_SERVICE_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    INVALID_EMAIL = "invalid_email"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    TOKEN_NOT_FOUND = "token_not_found"
    DOCUMENT_NOT_FOUND = "document_not_found"

    # Download token errors
    TOKEN_EXPIRED = "token_expired"
    TOKEN_EMAIL_MISMATCH = "token_email_mismatch"
    DOWNLOAD_LIMIT_EXCEEDED = "download_limit_exceeded"
    TOKEN_GENERATION_FAILED = "token_generation_failed"
    DOWNLOAD_VERIFICATION_FAILED = "download_verification_failed"

    # Audit trail errors
    AUDIT_RECORD_FAILED = "audit_record_failed"
    AUDIT_QUERY_FAILED = "audit_query_failed"

    # Infrastructure passthrough
    EXTERNAL_SERVICE_ERROR = "external_service_error"
