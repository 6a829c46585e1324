"""Trip recommendation ranking and route sequencing core."""

__version__ = "0.1.0"
