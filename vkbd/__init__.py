"""vkbd — physical keyboard bridge and candidate picker for on-screen keyboards."""

__version__ = "1.2.0"
