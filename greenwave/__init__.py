"""Green Wave: a deterministic traffic-light driving simulation core."""

__version__ = "1.0.0"
