"""Controllers which decide when to switch a device."""
