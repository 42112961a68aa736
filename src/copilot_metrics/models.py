"""Domain models for Copilot metrics aggregation.

Raw upstream records are kept as plain dictionaries; these dataclasses model
only the derived, chart-ready shapes and the credential held by the server.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Credential:
    """GitHub organization and bearer token used to call the metrics API."""

    org: str
    token: str = field(repr=False)


@dataclass(slots=True)
class ConfigStatus:
    """Configuration state reported to callers. Never includes the token."""

    has_token: bool
    org: str

    def to_dict(self) -> Dict[str, Any]:
        return {"hasToken": self.has_token, "orgName": self.org}


@dataclass(slots=True)
class DailyMetric:
    """Suggested/accepted line totals and acceptance rate for one day."""

    day: str
    total_lines_suggested: int
    total_lines_accepted: int
    active_users: int
    acceptance_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class LanguageTotal:
    """Accepted lines for one language summed over the whole feed."""

    name: str
    value: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class SeriesSummary:
    """Headline figures derived from a daily series."""

    overall_acceptance_rate: Optional[float]
    total_lines_suggested: int
    total_lines_accepted: int
    peak_active_users: int
    days: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
