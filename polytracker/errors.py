"""
Error taxonomy shared by the alignment engine, leaderboard and API client.

``DateParseError`` and ``LeaderboardOrderError`` subclass ``ValueError`` so
callers that already guard input validation with ``except ValueError`` keep
working.  ``EmptyInputWarning`` is advisory: an empty input is a valid
"no data yet" state, not a failure.
"""

from __future__ import annotations

from typing import Any, Optional


class DateParseError(ValueError):
    """Raised when a forecast or resolution date is missing or malformed.

    Attributes:
        value: The raw value that failed to parse.
        field: Payload field name the value came from, if known.
    """

    def __init__(self, value: Any, field: Optional[str] = None) -> None:
        self.value = value
        self.field = field
        where = f" in field '{field}'" if field else ""
        super().__init__(f"Cannot parse date {value!r}{where}; expected an ISO-8601 date or datetime.")


class LeaderboardOrderError(ValueError):
    """Raised in strict mode when accuracy summaries are not sorted by MAE ascending.

    Attributes:
        index: Position of the first summary whose MAE is lower than its predecessor's.
    """

    def __init__(self, index: int, previous: str, current: str, prev_mae: float, mae: float) -> None:
        self.index = index
        super().__init__(
            f"Accuracy summaries are not sorted by MAE ascending: "
            f"'{current}' (mae={mae:.3f}) at position {index} follows "
            f"'{previous}' (mae={prev_mae:.3f})."
        )


class TrackerApiError(RuntimeError):
    """Raised when the forecast backend cannot be reached or returns an unusable response.

    Attributes:
        endpoint: Request path, e.g. ``"/weather/forecasts"``.
    """

    def __init__(self, endpoint: str, reason: str) -> None:
        self.endpoint = endpoint
        super().__init__(f"Request to {endpoint} failed: {reason}")


class EmptyInputWarning(UserWarning):
    """Issued when alignment runs with no forecasts or no resolutions."""
