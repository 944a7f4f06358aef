"""Result container returned by every adapter call."""

from dataclasses import dataclass, field
from typing import List

from jobhunt.domain.models import JobSource, NormalizedJob


@dataclass
class AdapterResult:
    """
    Outcome of one adapter's fetch.

    Attributes:
        source: Adapter that produced the result
        jobs: Normalized postings, in the order the source returned them
        ok: False only when the adapter as a whole failed
        errors: Messages for identifiers (or the whole source) that failed
        duration_seconds: Wall-clock time spent in the adapter
    """

    source: JobSource
    jobs: List[NormalizedJob] = field(default_factory=list)
    ok: bool = True
    errors: List[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def had_errors(self) -> bool:
        return not self.ok or bool(self.errors)

    @classmethod
    def failed(cls, source: JobSource, error: str, duration_seconds: float = 0.0) -> "AdapterResult":
        """Result for an adapter that produced nothing because it raised."""
        return cls(
            source=source,
            jobs=[],
            ok=False,
            errors=[error],
            duration_seconds=duration_seconds,
        )
