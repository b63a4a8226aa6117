"""
Pytest configuration and fixtures for aggregation service tests.
"""
import pytest
from pyspark.sql import SparkSession

from normalization.src.cleaner import StormDataCleaner
from normalization.src.models import RawRecord
from normalization.src.parser import RAW_RECORD_SCHEMA


@pytest.fixture(scope="session")
def spark():
    """Create a Spark session for testing."""
    spark = (
        SparkSession.builder
        .appName("StormImpact-Aggregation-Tests")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .getOrCreate()
    )
    
    yield spark
    
    spark.stop()


@pytest.fixture
def scenario_records():
    """Three-event scenario with one event each in TORNADO, FLOOD and HEAT."""
    return [
        RawRecord(
            event_type="TORNADO F3",
            fatalities=5,
            injuries=10,
            property_damage=2,
            property_damage_exp="M",
            crop_damage=0,
            crop_damage_exp="",
        ),
        RawRecord(
            event_type="FLASH FLOOD",
            fatalities=1,
            injuries=0,
            property_damage=500,
            property_damage_exp="K",
            crop_damage=10,
            crop_damage_exp="K",
        ),
        RawRecord(
            event_type="EXCESSIVE HEAT",
            fatalities=20,
            injuries=2,
            property_damage=0,
            property_damage_exp="",
            crop_damage=1,
            crop_damage_exp="B",
        ),
    ]


@pytest.fixture
def sample_raw_data(spark):
    """Raw storm records covering several groups, ties and unmapped codes."""
    data = [
        # HAIL: health 3, damage 1.5M + 200K
        ("HAIL", 0.0, 2.0, 1.5, "M", 200.0, "K"),
        ("hail 0.75", 1.0, 0.0, 0.0, "", 0.0, ""),
        # WIND: health 3, one unmapped crop code
        ("THUNDERSTORM WIND", 1.0, 1.0, 50.0, "K", 4.0, "Z"),
        ("TSTM WIND", 0.0, 1.0, 10.0, "k", 0.0, ""),
        # STORM: health 0, unmapped property code
        ("ICE STORM", 0.0, 0.0, 7.0, "?x", 3.0, "m"),
        # OTHER: health 8
        ("DENSE FOG", 3.0, 5.0, 1.0, "H", 0.0, None),
    ]
    
    return spark.createDataFrame(data, RAW_RECORD_SCHEMA)


@pytest.fixture
def sample_cleaned_data(sample_raw_data):
    """Cleaned version of sample_raw_data."""
    return StormDataCleaner().clean(sample_raw_data)
