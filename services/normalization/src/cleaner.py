"""
Storm data cleaning and normalization

Fills missing values, assigns each event its canonical group, decodes
property and crop damage into US dollars and flags unmapped exponent
codes so they can be counted downstream.
"""
import logging
from typing import Dict, List, Optional
from pyspark.sql import DataFrame
from pyspark.sql import functions as F

from .classifier import event_group_column
from .decoder import decoded_damage_column

logger = logging.getLogger(__name__)


NUMERIC_COLUMNS = ["fatalities", "injuries", "property_damage", "crop_damage"]
TEXT_COLUMNS = ["event_type", "property_damage_exp", "crop_damage_exp"]

# (mantissa, exponent code, decoded output, unmapped flag)
DAMAGE_FIELDS = [
    ("property_damage", "property_damage_exp", "property_damage_usd", "property_exp_unmapped"),
    ("crop_damage", "crop_damage_exp", "crop_damage_usd", "crop_exp_unmapped"),
]


class StormDataCleaner:
    """Normalization of raw storm event records"""

    def __init__(self, max_unmapped_ratio: float = 0.01):
        """
        Initialize cleaner

        Args:
            max_unmapped_ratio: Share of unmapped exponent codes above
                which the quality metrics log a warning
        """
        self.max_unmapped_ratio = max_unmapped_ratio
        logger.info(
            f"Initialized StormDataCleaner, "
            f"max unmapped ratio: {max_unmapped_ratio}"
        )

    def clean(self, df: DataFrame) -> DataFrame:
        """
        Main cleaning pipeline

        Args:
            df: Parsed DataFrame with raw record columns

        Returns:
            DataFrame with event_group, decoded damage and anomaly flags
        """
        logger.info("Starting cleaning pipeline")

        df = self._handle_missing_values(df)
        df = self._classify_events(df)
        df = self._decode_damage(df)

        logger.info("Cleaning pipeline complete")
        return df

    def _handle_missing_values(self, df: DataFrame) -> DataFrame:
        """
        Replace nulls with neutral values

        Missing counts and mantissas become 0, missing labels and
        exponent codes become the empty string.
        """
        logger.info("Handling missing values")

        df = df.fillna(0.0, subset=[c for c in NUMERIC_COLUMNS if c in df.columns])
        df = df.fillna("", subset=[c for c in TEXT_COLUMNS if c in df.columns])
        return df

    def _classify_events(self, df: DataFrame) -> DataFrame:
        """Assign canonical event group"""
        logger.info("Classifying event types")
        return df.withColumn("event_group", event_group_column("event_type"))

    def _decode_damage(self, df: DataFrame) -> DataFrame:
        """
        Decode damage magnitudes into US dollars

        The decoded column is null where the exponent code is unmapped;
        the matching *_unmapped flag marks those rows.
        """
        logger.info("Decoding damage magnitudes")

        for mantissa_col, exp_col, usd_col, flag_col in DAMAGE_FIELDS:
            df = df.withColumn(usd_col, decoded_damage_column(mantissa_col, exp_col))
            df = df.withColumn(flag_col, F.col(usd_col).isNull())

        return df

    def compute_quality_metrics(self, df: DataFrame) -> Dict[str, any]:
        """
        Compute data quality metrics for cleaned data

        Args:
            df: Output of clean()

        Returns:
            Dictionary with row counts, unmapped code counts and
            the distinct unmapped codes per damage field
        """
        logger.info("Computing quality metrics")

        counts = df.agg(
            F.count(F.lit(1)).alias("total_rows"),
            F.sum(F.col("property_exp_unmapped").cast("int")).alias("unmapped_property"),
            F.sum(F.col("crop_exp_unmapped").cast("int")).alias("unmapped_crop"),
        ).collect()[0]

        total = int(counts["total_rows"])
        metrics = {
            "total_rows": total,
            "unmapped_property_exp_count": int(counts["unmapped_property"] or 0),
            "unmapped_crop_exp_count": int(counts["unmapped_crop"] or 0),
            "unmapped_codes": {
                "property_damage_exp": self._unmapped_codes(
                    df, "property_damage_exp", "property_exp_unmapped"
                ),
                "crop_damage_exp": self._unmapped_codes(
                    df, "crop_damage_exp", "crop_exp_unmapped"
                ),
            },
            "group_counts": {
                row["event_group"]: row["count"]
                for row in df.groupBy("event_group").count().collect()
            },
        }

        unmapped = (
            metrics["unmapped_property_exp_count"]
            + metrics["unmapped_crop_exp_count"]
        )
        if unmapped:
            ratio = unmapped / (2 * total) if total > 0 else 0
            message = (
                f"Unmapped exponent codes: {unmapped} "
                f"({100*ratio:.2f}% of damage fields), "
                f"codes: {metrics['unmapped_codes']}"
            )
            if ratio > self.max_unmapped_ratio:
                logger.warning(message)
            else:
                logger.info(message)

        logger.info(f"Quality metrics: {metrics}")
        return metrics

    @staticmethod
    def _unmapped_codes(df: DataFrame, exp_col: str, flag_col: str) -> List[str]:
        rows = (
            df.filter(F.col(flag_col))
            .select(exp_col)
            .distinct()
            .collect()
        )
        return sorted(row[exp_col] for row in rows)

    def exponent_code_counts(
        self,
        df: DataFrame,
        exp_col: str = "property_damage_exp"
    ) -> Dict[str, int]:
        """
        Frequency of each raw exponent code

        Args:
            df: Raw or cleaned DataFrame
            exp_col: Exponent code column

        Returns:
            Mapping code -> row count
        """
        return {
            row[exp_col]: row["count"]
            for row in df.groupBy(exp_col).count().collect()
        }


def create_cleaner(max_unmapped_ratio: Optional[float] = None) -> StormDataCleaner:
    """
    Factory function to create a cleaner instance

    Args:
        max_unmapped_ratio: Warning threshold (default 0.01)

    Returns:
        StormDataCleaner instance
    """
    if max_unmapped_ratio is None:
        return StormDataCleaner()
    return StormDataCleaner(max_unmapped_ratio)
