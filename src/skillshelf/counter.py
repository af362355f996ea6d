"""Per-endpoint success/failure tallies."""

from dataclasses import dataclass


@dataclass(slots=True)
class EndpointStats:
    success: int = 0
    failure: int = 0


class RequestCounter:
    """Count request outcomes per endpoint name for diagnostics."""

    def __init__(self) -> None:
        self._endpoints: dict[str, EndpointStats] = {}

    def record(self, endpoint: str, succeeded: bool) -> None:
        stats = self._endpoints.setdefault(endpoint, EndpointStats())
        if succeeded:
            stats.success += 1
        else:
            stats.failure += 1

    def get_stats(self) -> dict[str, dict[str, int]]:
        """Snapshot of all counters; mutating it does not affect the counter."""
        return {
            name: {"success": stats.success, "failure": stats.failure}
            for name, stats in self._endpoints.items()
        }
