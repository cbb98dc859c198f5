"""
Record source interfaces for the eligibility report runner.

A record source retrieves the identity and score records of one student.
The remote HTTP source is the production implementation; tests plug in
in-memory sources that satisfy the same protocol.
"""

from __future__ import annotations

import abc
from typing import Protocol, runtime_checkable

from eligibility.domain.models import StudentRecord


@runtime_checkable
class RecordSource(Protocol):
    """
    Common interface all record sources must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    """

    name: str

    async def fetch(self, student_id: int) -> StudentRecord:
        """
        Retrieve both records of a student.

        Parameters
        ----------
        student_id : int
            Identifier of the student within the source's school.

        Returns
        -------
        StudentRecord
            Identity and score of the student.

        Raises
        ------
        FetchError
            When either record is unavailable, undecodable or empty.
        """
        ...


class AbstractRecordSource(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and implement `fetch`.
    """

    name: str

    @abc.abstractmethod
    async def fetch(self, student_id: int) -> StudentRecord:  # pragma: no cover - interface only
        """Retrieve both records of a student."""
        raise NotImplementedError


__all__ = ["RecordSource", "AbstractRecordSource"]
