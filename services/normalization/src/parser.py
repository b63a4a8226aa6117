"""
Storm Data parser

Reads the NOAA Storm Data CSV (or in-memory records) and converts it to
a Spark DataFrame with the seven fields used by the impact pipeline.
"""
import logging
from typing import Dict, Iterable, Optional
from pyspark.sql import SparkSession, DataFrame
from pyspark.sql.types import (
    StructType, StructField, StringType, DoubleType
)
from pyspark.sql import functions as F

from .config import NormalizationConfig, get_config
from .models import RawRecord

logger = logging.getLogger(__name__)


RAW_RECORD_SCHEMA = StructType([
    StructField("event_type", StringType(), True),
    StructField("fatalities", DoubleType(), True),
    StructField("injuries", DoubleType(), True),
    StructField("property_damage", DoubleType(), True),
    StructField("property_damage_exp", StringType(), True),
    StructField("crop_damage", DoubleType(), True),
    StructField("crop_damage_exp", StringType(), True),
])

# NOAA header -> internal column name
SOURCE_COLUMNS: Dict[str, str] = {
    "EVTYPE": "event_type",
    "FATALITIES": "fatalities",
    "INJURIES": "injuries",
    "PROPDMG": "property_damage",
    "PROPDMGEXP": "property_damage_exp",
    "CROPDMG": "crop_damage",
    "CROPDMGEXP": "crop_damage_exp",
}


class StormDataParser:
    """Parser for NOAA Storm Data CSV exports"""

    def __init__(
        self,
        spark: SparkSession,
        config: Optional[NormalizationConfig] = None
    ):
        """
        Initialize parser

        Args:
            spark: SparkSession instance
            config: Normalization configuration (default: from environment)
        """
        self.spark = spark
        self.config = config or get_config()
        self.schema = RAW_RECORD_SCHEMA
        logger.info("Initialized StormDataParser")

    def parse_file(self, path: str) -> DataFrame:
        """
        Parse a Storm Data CSV file

        Every column is read as a string, then the seven used columns are
        selected, renamed and cast. Values that fail to cast become null.

        Args:
            path: Path to the CSV file (local, hdfs:// or s3a://)

        Returns:
            Spark DataFrame with RAW_RECORD_SCHEMA columns
        """
        logger.info(f"Parsing file: {path}")

        try:
            raw = self.spark.read.csv(
                path,
                sep=self.config.csv_delimiter,
                header=True,
                inferSchema=False,
                encoding=self.config.csv_encoding,
                quote=self.config.csv_quote,
                mode="PERMISSIVE",
                ignoreLeadingWhiteSpace=True,
                ignoreTrailingWhiteSpace=True
            )

            df = self._select_source_columns(raw)

            row_count = df.count()
            logger.info(f"Parsed {row_count} rows from {path}")

            if row_count == 0:
                logger.warning(f"No data rows found in {path}")

            return df

        except Exception as e:
            logger.error(f"Failed to parse {path}: {e}")
            raise

    def parse_records(self, records: Iterable[RawRecord]) -> DataFrame:
        """
        Build a DataFrame from in-memory raw records

        Args:
            records: RawRecord instances

        Returns:
            Spark DataFrame with RAW_RECORD_SCHEMA columns
        """
        rows = [record.as_row() for record in records]
        logger.info(f"Building DataFrame from {len(rows)} in-memory records")
        return self.spark.createDataFrame(rows, schema=self.schema)

    def _select_source_columns(self, raw: DataFrame) -> DataFrame:
        """Map NOAA headers onto the internal schema"""
        # Headers are matched case-insensitively
        available = {c.strip().upper(): c for c in raw.columns}

        missing = [c for c in SOURCE_COLUMNS if c not in available]
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Available: {raw.columns}"
            )

        selected = []
        for field in self.schema.fields:
            source = next(
                src for src, dst in SOURCE_COLUMNS.items() if dst == field.name
            )
            source_col = available[source]

            if isinstance(field.dataType, DoubleType):
                column = F.expr(f"try_cast(`{source_col}` AS DOUBLE)")
            else:
                column = F.col(f"`{source_col}`")

            selected.append(column.alias(field.name))

        return raw.select(*selected)

    def validate_data(self, df: DataFrame) -> Dict[str, any]:
        """
        Validate parsed data and collect quality metrics

        Args:
            df: Parsed DataFrame

        Returns:
            Dictionary with validation metrics
        """
        logger.info("Validating parsed data")

        metrics = {
            "total_rows": df.count(),
            "null_counts": {},
            "distinct_event_types": None,
        }

        # Count nulls per column
        null_row = df.agg(*[
            F.sum(F.when(F.col(field.name).isNull(), 1).otherwise(0)).alias(field.name)
            for field in self.schema.fields
        ]).collect()[0]

        for field in self.schema.fields:
            metrics["null_counts"][field.name] = int(null_row[field.name] or 0)

        metrics["distinct_event_types"] = (
            df.select("event_type").distinct().count()
        )

        logger.info(f"Validation metrics: {metrics}")
        return metrics


def create_parser(
    spark: SparkSession,
    config: Optional[NormalizationConfig] = None
) -> StormDataParser:
    """
    Factory function to create a parser instance

    Args:
        spark: SparkSession
        config: Optional normalization configuration

    Returns:
        StormDataParser instance
    """
    return StormDataParser(spark, config)
