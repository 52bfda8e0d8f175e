"""The charge controller switches the charger based on the battery level."""

from charge_assistant.constants import DEFAULT_HIGH_BATTERY_THRESHOLD, DEFAULT_LOW_BATTERY_THRESHOLD
from charge_assistant.devices import OnOffState


class ChargeController:
    """The charge controller switches the charger based on the battery level."""

    def __init__(
        self,
        low_threshold: float = DEFAULT_LOW_BATTERY_THRESHOLD,
        high_threshold: float = DEFAULT_HIGH_BATTERY_THRESHOLD,
    ) -> None:
        """Create a charge controller instance."""
        if low_threshold >= high_threshold:
            raise ValueError(f"The low threshold {low_threshold} must be below the high threshold {high_threshold}")
        self.low_threshold = low_threshold
        self.high_threshold = high_threshold

    def decide(self, battery_level: float) -> OnOffState | None:
        """Get the new state of the charger or None if it should not be switched.

        Levels equal to a threshold leave the charger alone.
        """
        if battery_level < self.low_threshold:
            return OnOffState.ON
        if battery_level > self.high_threshold:
            return OnOffState.OFF
        return None
