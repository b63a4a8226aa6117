"""
Configuration management for the aggregation service.
"""
from typing import Optional

from pydantic_settings import BaseSettings


class AggregationConfig(BaseSettings):
    """Configuration for aggregation service."""
    
    # Spark configuration
    spark_app_name: str = "StormImpact-Aggregation"
    spark_master: str = "local[*]"
    shuffle_partitions: int = 8
    
    # Ranking configuration
    rank_by: str = "health_impact"
    top_n: Optional[int] = None
    
    # Output configuration
    output_dir: str = "output"
    summary_dirname: str = "impact_summary"
    report_filename: str = "impact_report.json"
    
    class Config:
        env_file = ".env"
        env_prefix = "STORMIMPACT_"
        extra = "ignore"
    
    @property
    def summary_path(self) -> str:
        """Directory for the ranked summary CSV."""
        return f"{self.output_dir.rstrip('/')}/{self.summary_dirname}"
    
    @property
    def report_path(self) -> str:
        """Path of the JSON impact report."""
        return f"{self.output_dir.rstrip('/')}/{self.report_filename}"
