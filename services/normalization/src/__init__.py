"""
StormImpact Normalization Service

Spark-based normalization for storm event data.
Parses raw event records, maps free-text event types to canonical
groups, and decodes damage magnitudes into US dollars.
"""

__version__ = "0.1.0"
