"""
Raw storm event record

One row of the Storm Data table, restricted to the seven fields the
impact pipeline reads. Field order matches RAW_RECORD_SCHEMA.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class RawRecord:
    """Immutable record for one weather event observation"""
    event_type: str
    fatalities: float = 0.0
    injuries: float = 0.0
    property_damage: float = 0.0
    property_damage_exp: str = ""
    crop_damage: float = 0.0
    crop_damage_exp: str = ""

    def as_row(self) -> tuple:
        return (
            self.event_type,
            float(self.fatalities),
            float(self.injuries),
            float(self.property_damage),
            self.property_damage_exp,
            float(self.crop_damage),
            self.crop_damage_exp,
        )
