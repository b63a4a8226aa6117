"""
Orchestration and CLI for storm impact ranking.

This module coordinates the impact pipeline:
1. Create Spark session
2. Parse the Storm Data CSV
3. Normalize event groups and damage magnitudes
4. Aggregate and rank impact per event group
5. Write the ranked summary and the impact report
6. Collect and report metrics
"""
import argparse
import logging
import sys
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from pyspark.sql import SparkSession

from normalization.src.parser import StormDataParser, create_parser

from .aggregator import ImpactAggregator
from .config import AggregationConfig
from .impact_calculators import RANKING_COLUMNS
from .models import ImpactReport
from .writer import SummaryWriter


logger = logging.getLogger(__name__)


class ImpactOrchestrator:
    """Orchestrates the parse, normalize, aggregate and write pipeline."""

    def __init__(self, config: AggregationConfig):
        """
        Initialize orchestrator.

        Args:
            config: Configuration object
        """
        self.config = config
        self.spark: Optional[SparkSession] = None
        self.parser: Optional[StormDataParser] = None
        self.aggregator: Optional[ImpactAggregator] = None
        self.writer: Optional[SummaryWriter] = None
        self.last_report: Optional[ImpactReport] = None

    def setup_spark(self) -> SparkSession:
        """
        Create and configure Spark session.

        Returns:
            Configured SparkSession
        """
        logger.info("Initializing Spark session...")

        builder = SparkSession.builder.appName(self.config.spark_app_name)
        builder = builder.master(self.config.spark_master)
        builder = builder.config(
            "spark.sql.shuffle.partitions", str(self.config.shuffle_partitions)
        )

        # Performance tuning
        builder = builder.config("spark.sql.adaptive.enabled", "true")
        builder = builder.config("spark.sql.adaptive.coalescePartitions.enabled", "true")

        spark = builder.getOrCreate()

        logger.info(f"Spark session created: {spark.version}")

        return spark

    def setup_components(self, spark: Optional[SparkSession] = None):
        """Initialize all pipeline components."""
        self.spark = spark or self.setup_spark()
        self.parser = create_parser(self.spark)
        self.aggregator = ImpactAggregator(self.config, self.spark)
        self.writer = SummaryWriter(self.config)

    def run(
        self,
        input_path: str,
        rank_by: Optional[str] = None,
        top_n: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Run the complete impact pipeline for one Storm Data file.

        Args:
            input_path: Path to the Storm Data CSV
            rank_by: Ranking metric (default: config.rank_by)
            top_n: Limit on ranked groups (default: config.top_n)

        Returns:
            Dictionary with pipeline metrics and status
        """
        start_time = time.time()
        rank_by = rank_by or self.config.rank_by
        top_n = top_n if top_n is not None else self.config.top_n

        logger.info(
            f"Starting impact pipeline: input={input_path}, "
            f"rank_by={rank_by}, top_n={top_n}"
        )

        metrics = {
            "input_path": input_path,
            "rank_by": rank_by,
            "top_n": top_n,
            "status": "running",
            "start_time": datetime.utcnow().isoformat(),
        }

        try:
            # Step 1: Parse
            raw_df = self.parser.parse_file(input_path)
            metrics["parse_metrics"] = self.parser.validate_data(raw_df)

            # Steps 2-3: Normalize, aggregate, rank
            report = self.aggregator.build_report(raw_df, rank_by=rank_by, top_n=top_n)
            self.last_report = report
            metrics["total_records"] = report.total_records
            metrics["group_count"] = len(report.summaries)
            metrics["anomalies"] = report.to_dict()["anomalies"]
            metrics["ranking"] = [
                {
                    "group": s.group,
                    "health_impact": s.health_impact,
                    "total_damage_usd": s.total_damage_usd,
                }
                for s in report.summaries
            ]

            # Step 4: Write
            ranked_df = self.spark.createDataFrame(
                [s.to_dict() for s in report.summaries],
                schema=_summary_schema()
            )
            metrics["write_stats"] = self.writer.write_summary(ranked_df)
            metrics["report_path"] = self.writer.write_report(report)
            metrics["validation_metrics"] = self.writer.validate_output()

            elapsed_time = time.time() - start_time
            metrics["elapsed_seconds"] = round(elapsed_time, 2)
            metrics["status"] = "success"
            metrics["end_time"] = datetime.utcnow().isoformat()

            logger.info(
                f"Impact pipeline completed in {elapsed_time:.2f}s: "
                f"{metrics['group_count']} groups ranked"
            )

        except Exception as e:
            elapsed_time = time.time() - start_time
            metrics["elapsed_seconds"] = round(elapsed_time, 2)
            metrics["status"] = "failed"
            metrics["error"] = str(e)
            metrics["end_time"] = datetime.utcnow().isoformat()

            logger.error(f"Impact pipeline failed: {e}", exc_info=True)

        return metrics

    def cleanup(self):
        """Clean up resources."""
        if self.spark:
            logger.info("Stopping Spark session...")
            self.spark.stop()


def _summary_schema() -> str:
    return (
        "`group` string, total_fatalities double, total_injuries double, "
        "total_property_damage_usd double, total_crop_damage_usd double, "
        "health_impact double, total_damage_usd double, event_count long, "
        "unmapped_property_exp_count long, unmapped_crop_exp_count long, "
        "damage_complete boolean"
    )


def format_ranking(report: ImpactReport) -> List[str]:
    """Render the ranked groups as fixed-width text lines."""
    lines = [
        f"{'#':>3}  {'Group':<10} {'Fatalities':>11} {'Injuries':>11} "
        f"{'Health':>11} {'Damage (USD)':>18}"
    ]
    for rank, s in enumerate(report.summaries, start=1):
        marker = "" if s.damage_complete else " *"
        lines.append(
            f"{rank:>3}  {s.group:<10} {s.total_fatalities:>11,.0f} "
            f"{s.total_injuries:>11,.0f} {s.health_impact:>11,.0f} "
            f"{s.total_damage_usd:>18,.0f}{marker}"
        )
    return lines


def main(argv: Optional[List[str]] = None):
    """CLI entry point for the impact pipeline."""
    parser = argparse.ArgumentParser(
        description="StormImpact - rank storm event groups by impact",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Rank by fatalities + injuries
  stormimpact repdata-data-StormData.csv output/

  # Top 5 groups by property + crop damage
  stormimpact repdata-data-StormData.csv output/ --rank-by total_damage_usd --top-n 5
        """
    )

    parser.add_argument(
        "input_path",
        help="Path to the Storm Data CSV"
    )

    parser.add_argument(
        "output_dir",
        help="Directory for the ranked summary and impact report"
    )

    parser.add_argument(
        "--rank-by",
        choices=list(RANKING_COLUMNS),
        default=None,
        help="Ranking metric (default: health_impact)"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=None,
        help="Only keep the first N groups"
    )

    parser.add_argument(
        "--spark-master",
        default=None,
        help="Spark master URL (default: local[*])"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    overrides = {"output_dir": args.output_dir}
    if args.spark_master:
        overrides["spark_master"] = args.spark_master
    config = AggregationConfig(**overrides)

    orchestrator = ImpactOrchestrator(config)

    try:
        orchestrator.setup_components()

        metrics = orchestrator.run(
            input_path=args.input_path,
            rank_by=args.rank_by,
            top_n=args.top_n
        )

        # Print summary
        print("\n" + "=" * 60)
        print("IMPACT SUMMARY")
        print("=" * 60)
        print(f"Input:             {metrics['input_path']}")
        print(f"Ranked By:         {metrics['rank_by']}")
        print(f"Status:            {metrics['status']}")
        print(f"Records:           {metrics.get('total_records', 'N/A')}")
        print(f"Groups:            {metrics.get('group_count', 'N/A')}")
        print(f"Elapsed Time:      {metrics['elapsed_seconds']}s")

        if "anomalies" in metrics:
            anomalies = metrics["anomalies"]
            print(f"\nUnmapped Exponent Codes:")
            print(f"  Property:        {anomalies['unmapped_property_exp_count']}")
            print(f"  Crop:            {anomalies['unmapped_crop_exp_count']}")

        if metrics["status"] == "success":
            print()
            for line in format_ranking(orchestrator.last_report):
                print(line)
        else:
            print(f"\nError: {metrics.get('error')}")

        print("=" * 60 + "\n")

        # Exit with appropriate code
        sys.exit(0 if metrics["status"] == "success" else 1)

    except Exception as e:
        logger.error(f"Impact pipeline failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        orchestrator.cleanup()


if __name__ == "__main__":
    main()
