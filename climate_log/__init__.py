"""
Zone Climate Log

Ingestion, normalization, zone-aware range validation, filtering and
aggregation of temperature and humidity readings logged by operators
across facility zones.
"""

__version__ = "1.0.0"
