import pytest
from pyspark.sql import SparkSession

from normalization.src.parser import RAW_RECORD_SCHEMA


@pytest.fixture(scope="session")
def spark():
    """Create Spark session for tests"""
    spark = (
        SparkSession.builder
        .appName("StormImpact-Normalization-Tests")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .getOrCreate()
    )
    
    yield spark
    
    spark.stop()


@pytest.fixture
def sample_storm_data(spark):
    """Sample raw storm records for testing"""
    data = [
        ("TORNADO F3", 5.0, 10.0, 2.0, "M", 0.0, ""),
        ("FLASH FLOOD", 1.0, 0.0, 500.0, "K", 10.0, "K"),
        ("EXCESSIVE HEAT", 20.0, 2.0, 0.0, "", 1.0, "B"),
        ("Thunderstorm Wind", 0.0, 1.0, 25.0, "k", 0.0, None),  # Missing crop code
        ("ICE STORM", 0.0, 0.0, 3.0, "Z", 5.0, "m"),            # Unmapped property code
        (None, None, None, None, None, None, None),             # All missing
    ]
    
    return spark.createDataFrame(data, RAW_RECORD_SCHEMA)


@pytest.fixture
def storm_csv(tmp_path):
    """Small Storm Data CSV with NOAA headers and an extra column"""
    path = tmp_path / "storm_data.csv"
    path.write_text(
        "STATE__,EVTYPE,FATALITIES,INJURIES,PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP\n"
        '1.00,TORNADO,0.00,15.00,25.00,K,0.00,\n'
        '1.00,"HAIL",0.00,0.00,2.50,M,1.00,K\n'
        '1.00,TSTM WIND,1.00,n/a,0.00,,0.00,\n'
    )
    return str(path)
