"""
Record sources package for the eligibility report runner.

This module re-exports the source interfaces and the remote HTTP source so
downstream code can import from `eligibility.sources` directly.
"""

from eligibility.sources.abstract import AbstractRecordSource, RecordSource
from eligibility.sources.remote import RemoteRecordSource

__all__ = [
    "AbstractRecordSource",
    "RecordSource",
    "RemoteRecordSource",
]
