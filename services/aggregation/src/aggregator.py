"""
Main aggregation logic for ranking canonical event groups by impact.
"""
import logging
from typing import Iterable, List, Optional

from pyspark.sql import SparkSession, DataFrame

from normalization.src.cleaner import StormDataCleaner, create_cleaner
from normalization.src.models import RawRecord
from normalization.src.parser import create_parser

from .config import AggregationConfig
from .impact_calculators import calculate_group_impact, rank_group_impact
from .models import GroupSummary, ImpactReport


logger = logging.getLogger(__name__)


class ImpactAggregator:
    """Aggregates raw storm records into ranked group summaries."""

    def __init__(
        self,
        config: AggregationConfig,
        spark: SparkSession,
        cleaner: Optional[StormDataCleaner] = None
    ):
        """
        Initialize aggregator.

        Args:
            config: Configuration object
            spark: Active SparkSession
            cleaner: Normalization cleaner (default: create_cleaner())
        """
        self.config = config
        self.spark = spark
        self.cleaner = cleaner or create_cleaner()

    def compute_group_impact(
        self,
        cleaned_df: DataFrame,
        rank_by: Optional[str] = None,
        top_n: Optional[int] = None
    ) -> DataFrame:
        """
        Compute ranked group impact from already cleaned records.

        Args:
            cleaned_df: Output of StormDataCleaner.clean
            rank_by: Ranking metric (default: config.rank_by)
            top_n: Limit on ranked groups (default: config.top_n)

        Returns:
            Ranked DataFrame, one row per observed group
        """
        rank_by = rank_by or self.config.rank_by
        top_n = top_n if top_n is not None else self.config.top_n

        impact_df = calculate_group_impact(cleaned_df)

        return rank_group_impact(impact_df, rank_by=rank_by, top_n=top_n)

    def aggregate(
        self,
        raw_df: DataFrame,
        rank_by: Optional[str] = None,
        top_n: Optional[int] = None
    ) -> DataFrame:
        """
        Classify, decode, group and rank raw storm records.

        Args:
            raw_df: DataFrame with raw record columns
            rank_by: Ranking metric (default: config.rank_by)
            top_n: Limit on ranked groups (default: config.top_n)

        Returns:
            Ranked group impact DataFrame
        """
        cleaned_df = self.cleaner.clean(raw_df)
        return self.compute_group_impact(cleaned_df, rank_by=rank_by, top_n=top_n)

    def aggregate_records(
        self,
        records: Iterable[RawRecord],
        rank_by: Optional[str] = None,
        top_n: Optional[int] = None
    ) -> List[GroupSummary]:
        """
        Aggregate in-memory raw records into ranked group summaries.

        Args:
            records: RawRecord instances
            rank_by: Ranking metric (default: config.rank_by)
            top_n: Limit on ranked groups (default: config.top_n)

        Returns:
            GroupSummary list in ranking order; empty for empty input
        """
        raw_df = create_parser(self.spark).parse_records(records)
        ranked_df = self.aggregate(raw_df, rank_by=rank_by, top_n=top_n)
        return self.collect_summaries(ranked_df)

    @staticmethod
    def collect_summaries(ranked_df: DataFrame) -> List[GroupSummary]:
        """Collect a ranked impact DataFrame, preserving its order."""
        return [GroupSummary.from_row(row) for row in ranked_df.collect()]

    def build_report(
        self,
        raw_df: DataFrame,
        rank_by: Optional[str] = None,
        top_n: Optional[int] = None
    ) -> ImpactReport:
        """
        Build a ranked impact report with run-level anomaly counts.

        Args:
            raw_df: DataFrame with raw record columns
            rank_by: Ranking metric (default: config.rank_by)
            top_n: Limit on ranked groups (default: config.top_n)

        Returns:
            ImpactReport
        """
        rank_by = rank_by or self.config.rank_by

        cleaned_df = self.cleaner.clean(raw_df).cache()

        try:
            quality = self.cleaner.compute_quality_metrics(cleaned_df)
            ranked_df = self.compute_group_impact(
                cleaned_df, rank_by=rank_by, top_n=top_n
            )
            summaries = self.collect_summaries(ranked_df)
        finally:
            cleaned_df.unpersist()

        report = ImpactReport(
            summaries=summaries,
            rank_by=rank_by,
            total_records=quality["total_rows"],
            unmapped_property_exp_count=quality["unmapped_property_exp_count"],
            unmapped_crop_exp_count=quality["unmapped_crop_exp_count"],
            unmapped_codes=quality["unmapped_codes"],
        )

        logger.info(
            f"Impact report: {len(summaries)} groups from "
            f"{report.total_records} records, ranked by {rank_by}"
        )
        if report.has_anomalies:
            logger.warning(
                f"Damage totals exclude {report.unmapped_property_exp_count} "
                f"property and {report.unmapped_crop_exp_count} crop values "
                f"with unmapped exponent codes"
            )

        return report
