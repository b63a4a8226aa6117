"""
Summary writer for ranked impact tables and reports.
"""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from pyspark.sql import DataFrame, SparkSession

from .config import AggregationConfig
from .models import ImpactReport


logger = logging.getLogger(__name__)


class SummaryWriter:
    """Writes ranked group impact to CSV and the impact report to JSON."""

    def __init__(self, config: AggregationConfig):
        """
        Initialize writer.

        Args:
            config: Configuration object
        """
        self.config = config
        logger.info(
            f"Initialized SummaryWriter: summary={config.summary_path}, "
            f"report={config.report_path}"
        )

    def write_summary(self, ranked_df: DataFrame, mode: str = "overwrite") -> Dict[str, Any]:
        """
        Write ranked group impact as a single CSV file.

        The table has at most one row per canonical group, so it is
        coalesced to one partition; coalesce keeps the ranked order.

        Args:
            ranked_df: Ranked impact DataFrame
            mode: Write mode ('overwrite', 'error')

        Returns:
            Dictionary with write statistics
        """
        row_count = ranked_df.count()
        logger.info(f"Writing {row_count} group rows to {self.config.summary_path}")

        try:
            ranked_df.coalesce(1).write.csv(
                self.config.summary_path,
                mode=mode,
                header=True
            )
        except Exception as e:
            logger.error(f"Failed to write impact summary: {e}")
            raise

        stats = {
            "output_path": self.config.summary_path,
            "rows_written": row_count,
            "mode": mode,
            "written_at": datetime.utcnow().isoformat(),
        }

        logger.info(f"Write complete: {stats}")
        return stats

    def write_report(self, report: ImpactReport) -> str:
        """
        Write the impact report, including anomaly counts, as JSON.

        Args:
            report: ImpactReport to persist

        Returns:
            Path of the written file
        """
        path = Path(self.config.report_path)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(report.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Failed to write impact report to {path}: {e}")
            raise

        logger.info(f"Impact report written to {path}")
        return str(path)

    def validate_output(self) -> Dict[str, Any]:
        """
        Validate written output.

        Reads back the summary CSV and checks its row count and columns.

        Returns:
            Validation metrics
        """
        logger.info(f"Validating output at {self.config.summary_path}")

        spark = SparkSession.getActiveSession()
        if spark is None:
            raise RuntimeError("No active Spark session found")

        df = spark.read.csv(self.config.summary_path, header=True)

        metrics = {
            "output_path": self.config.summary_path,
            "total_rows": df.count(),
            "columns": df.columns,
        }

        logger.info(f"Validation metrics: {metrics}")
        return metrics
