"""Application layer - Use cases and orchestration.

This layer contains the secure download use cases following the CQRS pattern:
- Commands: Generate, verify and revoke links, cleanup, link re-requests
- Queries: Download statistics and the attempt trail

Structure:
- commands/: Command dataclasses and handlers (write operations)
- queries/: Query dataclasses and handlers (read operations)
- services/: Services shared by handlers (download attempt logger)

The application layer orchestrates domain logic but contains no infrastructure.
"""
