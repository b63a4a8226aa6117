"""
Configuration for normalization service
"""
from typing import Optional
from pydantic_settings import BaseSettings


class NormalizationConfig(BaseSettings):
    """Normalization service configuration"""
    
    # Spark configuration
    spark_app_name: str = "StormImpact-Normalization"
    spark_master: Optional[str] = None  # None = local mode
    shuffle_partitions: int = 8
    
    # Raw CSV options
    csv_delimiter: str = ","
    csv_encoding: str = "UTF-8"
    csv_quote: str = '"'
    
    # Data quality thresholds
    max_unmapped_ratio: float = 0.01  # Warn if >1% of codes are unmapped
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "STORMIMPACT_"
        extra = "ignore"


def get_config() -> NormalizationConfig:
    """Get normalization configuration instance"""
    return NormalizationConfig()
