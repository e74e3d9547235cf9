"""Driver discovery, scoring, and ride matching for a ride-hailing backend."""

__version__ = "1.0.0"
