"""Position-based player qualification, ranking and predictive enrichment."""

__version__ = "0.1.0"
