"""kingside — chess rules engine with a three-tier computer opponent."""

__version__ = "0.1.0"
