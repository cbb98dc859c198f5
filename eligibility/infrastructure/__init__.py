"""
Infrastructure package for the eligibility report runner.

Centralizes HTTP connectivity concerns (client construction and lifecycle).
Keep this layer focused on I/O and resource management, decoupled from
aggregation/orchestrator logic.
"""

from eligibility.infrastructure.http_factory import (
    build_client,
    build_remote_source,
    remote_source,
)

__all__ = [
    "build_client",
    "build_remote_source",
    "remote_source",
]
