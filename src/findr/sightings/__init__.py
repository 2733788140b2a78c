"""Sighting persistence."""

from findr.sightings.mapping import row_to_sighting, sighting_to_row, update_to_row
from findr.sightings.service import SightingService

__all__ = [
    "SightingService",
    "row_to_sighting",
    "sighting_to_row",
    "update_to_row",
]
