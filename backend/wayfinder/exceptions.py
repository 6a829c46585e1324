"""Error taxonomy for the ranking, routing and budget core."""


class WayfinderError(Exception):
    """Base class for all typed failures raised by the core."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    @property
    def error_type(self) -> str:
        return type(self).__name__


class InvalidInput(WayfinderError, ValueError):
    """Malformed or out-of-range input (trip params, coordinates, limits)."""


class InvalidAmount(InvalidInput):
    """A money amount that is negative or otherwise unusable."""


class Overspend(InvalidAmount):
    """A budget commit that would push committed spend past the total."""


class InvalidWeightConfig(WayfinderError, ValueError):
    """Scoring weights that are negative or do not sum to 1.0."""
