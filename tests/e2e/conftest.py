"""
Pytest fixtures for end-to-end tests.

Provides fixtures for:
- Local Spark session
- Sample Storm Data CSV generation
"""

import pytest
from pyspark.sql import SparkSession


STORM_DATA_HEADER = (
    "STATE__,BGN_DATE,STATE,EVTYPE,FATALITIES,INJURIES,"
    "PROPDMG,PROPDMGEXP,CROPDMG,CROPDMGEXP,REFNUM"
)

# (EVTYPE, FATALITIES, INJURIES, PROPDMG, PROPDMGEXP, CROPDMG, CROPDMGEXP)
STORM_EVENTS = [
    ("TORNADO", 0, 15, 25.0, "K", 0, ""),
    ("TORNADO", 0, 2, 2.5, "K", 0, ""),
    ("TSTM WIND", 0, 0, 2.5, "K", 0, ""),
    ("HAIL", 0, 0, 0, "", 0, ""),
    ("THUNDERSTORM WINDS", 1, 0, 50, "K", 5, "K"),
    ("FLASH FLOOD", 2, 0, 1.2, "M", 0.5, "M"),
    ("EXCESSIVE HEAT", 10, 30, 0, "", 0, ""),
    ("HEAT WAVE", 3, 0, 0, "", 2, "B"),
    ("ICE STORM", 0, 4, 5, "M", 0, "?"),
    ("WINTER STORM", 1, 1, 3, "h", 0, ""),
    ("HEAVY SNOW", 0, 1, 7, "2", 0, ""),
    ("HEAVY RAIN", 0, 0, 1, "5", 0, ""),
    ("WILDFIRE", 0, 3, 100, "K", 20, "k"),
    ("HURRICANE/TYPHOON", 5, 2, 1, "B", 100, "M"),
    ("EXTREME COLD", 4, 0, 0, "", 10, "m"),
    ("RIP CURRENT", 6, 1, 0, "", 0, ""),
    ("DENSE FOG", 0, 2, 3, "X", 1, "Y"),
]


@pytest.fixture(scope="session")
def spark():
    """Create Spark session for end-to-end tests."""
    spark = (
        SparkSession.builder
        .appName("StormImpact-E2E-Tests")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .getOrCreate()
    )
    
    yield spark
    
    spark.stop()


@pytest.fixture
def storm_data_csv(tmp_path):
    """
    Write a Storm Data style CSV.
    
    Extra NOAA columns are included to check they are ignored.
    """
    path = tmp_path / "repdata-data-StormData.csv"
    
    lines = [STORM_DATA_HEADER]
    for i, (evtype, fat, inj, prop, prop_exp, crop, crop_exp) in enumerate(STORM_EVENTS, start=1):
        lines.append(
            f'1.00,"4/18/1950 0:00:00","AL","{evtype}",{fat},{inj},'
            f'{prop},{prop_exp},{crop},{crop_exp},{i}'
        )
    
    path.write_text("\n".join(lines) + "\n")
    return str(path)
