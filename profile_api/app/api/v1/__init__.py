"""Version 1 of the Developer Profile API."""
