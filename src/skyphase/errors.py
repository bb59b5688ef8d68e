"""Exception types. Both are handled inside the engine and replaced by fallbacks."""


class SkyPhaseError(Exception):
    """Base class for engine errors."""


class LocationUnavailable(SkyPhaseError):
    """No coordinates are known for a timezone identifier."""

    def __init__(self, timezone: str):
        super().__init__(f"No coordinates for timezone: {timezone}")
        self.timezone = timezone


class DegenerateSolarWindow(SkyPhaseError):
    """Solar events are out of their normal order (collapsed or inverted twilight)."""

    def __init__(self, violations: tuple[str, ...]):
        super().__init__(f"Degenerate solar window: {', '.join(violations)}")
        self.violations = violations
