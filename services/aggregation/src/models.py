"""
Group summary and impact report models.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List

from pyspark.sql import Row


@dataclass(frozen=True)
class GroupSummary:
    """Impact totals for one canonical event group."""
    group: str
    total_fatalities: float = 0.0
    total_injuries: float = 0.0
    total_property_damage_usd: float = 0.0
    total_crop_damage_usd: float = 0.0
    event_count: int = 0
    # Rows whose exponent code was unmapped; their damage counted as 0
    unmapped_property_exp_count: int = 0
    unmapped_crop_exp_count: int = 0

    @property
    def health_impact(self) -> float:
        return self.total_fatalities + self.total_injuries

    @property
    def total_damage_usd(self) -> float:
        return self.total_property_damage_usd + self.total_crop_damage_usd

    @property
    def damage_complete(self) -> bool:
        """False if any damage value in the group could not be decoded."""
        return (
            self.unmapped_property_exp_count == 0
            and self.unmapped_crop_exp_count == 0
        )

    @classmethod
    def from_row(cls, row: Row) -> "GroupSummary":
        return cls(
            group=row["group"],
            total_fatalities=float(row["total_fatalities"]),
            total_injuries=float(row["total_injuries"]),
            total_property_damage_usd=float(row["total_property_damage_usd"]),
            total_crop_damage_usd=float(row["total_crop_damage_usd"]),
            event_count=int(row["event_count"]),
            unmapped_property_exp_count=int(row["unmapped_property_exp_count"]),
            unmapped_crop_exp_count=int(row["unmapped_crop_exp_count"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group": self.group,
            "total_fatalities": self.total_fatalities,
            "total_injuries": self.total_injuries,
            "total_property_damage_usd": self.total_property_damage_usd,
            "total_crop_damage_usd": self.total_crop_damage_usd,
            "health_impact": self.health_impact,
            "total_damage_usd": self.total_damage_usd,
            "event_count": self.event_count,
            "unmapped_property_exp_count": self.unmapped_property_exp_count,
            "unmapped_crop_exp_count": self.unmapped_crop_exp_count,
            "damage_complete": self.damage_complete,
        }


@dataclass(frozen=True)
class ImpactReport:
    """Ranked group summaries with run-level data quality counts."""
    summaries: List[GroupSummary] = field(default_factory=list)
    rank_by: str = "health_impact"
    total_records: int = 0
    unmapped_property_exp_count: int = 0
    unmapped_crop_exp_count: int = 0
    unmapped_codes: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def has_anomalies(self) -> bool:
        return bool(self.unmapped_property_exp_count or self.unmapped_crop_exp_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank_by": self.rank_by,
            "total_records": self.total_records,
            "anomalies": {
                "unmapped_property_exp_count": self.unmapped_property_exp_count,
                "unmapped_crop_exp_count": self.unmapped_crop_exp_count,
                "unmapped_codes": self.unmapped_codes,
            },
            "groups": [summary.to_dict() for summary in self.summaries],
        }
