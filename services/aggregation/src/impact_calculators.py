"""
Impact calculators for grouped storm event aggregations.

Each calculator takes a PySpark DataFrame of cleaned storm records
(output of the normalization cleaner) and computes per-group impact
totals or rankings over them.
"""
from typing import Optional

from pyspark.sql import DataFrame
from pyspark.sql import functions as F


RANKING_COLUMNS = ("health_impact", "total_damage_usd")

SUMMARY_COLUMNS = [
    "group",
    "total_fatalities",
    "total_injuries",
    "total_property_damage_usd",
    "total_crop_damage_usd",
    "health_impact",
    "total_damage_usd",
    "event_count",
    "unmapped_property_exp_count",
    "unmapped_crop_exp_count",
]


def calculate_group_impact(df: DataFrame) -> DataFrame:
    """
    Calculate impact totals per canonical event group.

    Expected input columns:
    - event_group: canonical group label
    - fatalities, injuries: counts (nulls already filled)
    - property_damage_usd, crop_damage_usd: decoded damage, null if unmapped
    - property_exp_unmapped, crop_exp_unmapped: anomaly flags

    Returns DataFrame with SUMMARY_COLUMNS, one row per group observed.
    Undecodable damage values contribute 0 to the sums and are counted
    in the unmapped_* columns instead.
    """
    grouped = df.groupBy(F.col("event_group").alias("group"))

    totals = grouped.agg(
        # Human impact
        F.sum("fatalities").alias("total_fatalities"),
        F.sum("injuries").alias("total_injuries"),

        # Economic impact (sum skips nulls; all-null groups yield 0)
        F.coalesce(F.sum("property_damage_usd"), F.lit(0.0)).alias("total_property_damage_usd"),
        F.coalesce(F.sum("crop_damage_usd"), F.lit(0.0)).alias("total_crop_damage_usd"),

        # Counts
        F.count(F.lit(1)).alias("event_count"),
        F.sum(F.col("property_exp_unmapped").cast("int")).alias("unmapped_property_exp_count"),
        F.sum(F.col("crop_exp_unmapped").cast("int")).alias("unmapped_crop_exp_count"),
    )

    # Derived metrics
    totals = totals.withColumn(
        "health_impact",
        F.col("total_fatalities") + F.col("total_injuries")
    )
    totals = totals.withColumn(
        "total_damage_usd",
        F.col("total_property_damage_usd") + F.col("total_crop_damage_usd")
    )

    return totals.select(*SUMMARY_COLUMNS)


def rank_group_impact(
    df: DataFrame,
    rank_by: str = "health_impact",
    top_n: Optional[int] = None
) -> DataFrame:
    """
    Order group impact rows by a ranking metric.

    Rows are sorted descending by rank_by, ties broken by group label
    ascending so the order is reproducible.

    Args:
        df: Output of calculate_group_impact
        rank_by: One of RANKING_COLUMNS
        top_n: Keep only the first N groups (default: all)

    Returns:
        Ranked DataFrame
    """
    if rank_by not in RANKING_COLUMNS:
        raise ValueError(
            f"Unknown ranking metric: {rank_by}. "
            f"Must be one of {list(RANKING_COLUMNS)}"
        )

    if top_n is not None and top_n < 1:
        raise ValueError(f"top_n must be positive, got {top_n}")

    ranked = df.orderBy(F.col(rank_by).desc(), F.col("group").asc())

    if top_n is not None:
        ranked = ranked.limit(top_n)

    return ranked
