"""ImobControl: real-estate portfolio management core."""

__version__ = "1.0.0"
