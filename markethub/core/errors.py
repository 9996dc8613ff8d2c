"""Error taxonomy shared by clients and services.

Every failure raised by markethub is a ``MarketHubError``. Orchestration code
wraps the failures of the calls it made into a new error and keeps them as
``reasons``, so the full chain can be rendered with ``describe()``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional


class MarketHubError(Exception):
    kind = "Internal"

    def __init__(self, message: str, reasons: Optional[Iterable[BaseException]] = None):
        super().__init__(message)
        self.message = message
        self.reasons: List[BaseException] = list(reasons or [])

    def __str__(self) -> str:
        return self.message

    def describe(self, indent: int = 0) -> str:
        """Render this error and its nested reasons, one per line."""
        pad = "  " * indent
        lines = [f"{pad}{self.kind}: {self.message}"]
        for reason in self.reasons:
            if isinstance(reason, MarketHubError):
                lines.append(reason.describe(indent + 1))
            else:
                lines.append(f"{pad}  {type(reason).__name__}: {reason}")
        return "\n".join(lines)


class BadRequestError(MarketHubError):
    kind = "BadRequest"


class NotFoundError(MarketHubError):
    kind = "NotFound"


class ConflictError(MarketHubError):
    kind = "Conflict"


class RequestTimeoutError(MarketHubError):
    kind = "Timeout"


class UnavailableError(MarketHubError):
    kind = "Unavailable"


class InternalError(MarketHubError):
    kind = "Internal"
