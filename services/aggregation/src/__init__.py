"""
StormImpact Aggregation Service

Sums human and economic impact per canonical event group from
normalized storm records and ranks the groups.
"""

__version__ = "0.1.0"
