"""Switch a charger on and off based on the battery level of a device."""

__version__ = "0.1.0"
