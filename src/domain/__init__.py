"""Domain layer - Pure business logic.

This layer contains the download token and attempt entities, the failure
taxonomy, the email rules, and the protocols (ports) the application layer
depends on. The domain layer has NO dependencies on any framework or
infrastructure - it is pure Python.

Structure:
- entities/: DownloadToken, DownloadAttempt, ProjectDocument
- enums/: VerificationFailureReason
- errors/: Errors returned as data in Result types
- protocols/: Repository, audit, token source and IP lookup interfaces
- validators/: Email normalization and syntax rules
"""
