"""
Event type classification

Maps free-text event type labels (EVTYPE) to a closed set of canonical
groups using an ordered list of case-insensitive substring rules.
The first matching rule wins; rows matching no rule fall into OTHER.

Rule order matters because patterns overlap:
- "THUNDERSTORM WIND" hits WIND before STORM
- "ICE STORM" hits STORM before COLD
- "TORNADO AND HAIL" hits HAIL before TORNADO
"""
import logging
from typing import Optional, Tuple

from pyspark.sql import Column
from pyspark.sql import functions as F

logger = logging.getLogger(__name__)


OTHER = "OTHER"

# (group, patterns) in evaluation order
EVENT_GROUP_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("HAIL", ("HAIL",)),
    ("WIND", ("WIND", "FUNNEL")),
    ("TORNADO", ("TORNADO", "WATERSPOUT")),
    ("FLOOD", ("FLOOD", "FLD")),
    ("SNOW", ("SNOW",)),
    ("RAIN", ("RAIN",)),
    ("STORM", ("STORM", "LIGHTNING", "SURGE")),
    ("FIRE", ("FIRE",)),
    ("HURRICANE", ("HURRICANE", "TYPHOON")),
    ("COLD", ("COLD", "ICE", "FROST", "ICY", "FREEZ")),
    ("HEAT", ("HEAT", "HOT", "WARM", "DRY", "DROUGHT")),
)

CANONICAL_GROUPS: Tuple[str, ...] = tuple(
    group for group, _ in EVENT_GROUP_RULES
) + (OTHER,)


def classify_event_type(event_type: Optional[str]) -> str:
    """
    Classify a raw event type label into its canonical group

    Args:
        event_type: Free-text event label (any case, may be None)

    Returns:
        One of CANONICAL_GROUPS
    """
    text = (event_type or "").upper()

    for group, patterns in EVENT_GROUP_RULES:
        if any(pattern in text for pattern in patterns):
            return group

    return OTHER


def event_group_column(event_type_col: str = "event_type") -> Column:
    """
    Build a Spark column expression equivalent to classify_event_type

    The when() chain is evaluated top to bottom, so the first matching
    rule wins exactly as in the Python classifier.

    Args:
        event_type_col: Name of the raw event type column

    Returns:
        Column yielding the canonical group label
    """
    text = F.upper(F.coalesce(F.col(event_type_col), F.lit("")))

    expr = None
    for group, patterns in EVENT_GROUP_RULES:
        condition = None
        for pattern in patterns:
            match = text.contains(pattern)
            condition = match if condition is None else condition | match

        if expr is None:
            expr = F.when(condition, F.lit(group))
        else:
            expr = expr.when(condition, F.lit(group))

    return expr.otherwise(F.lit(OTHER))
