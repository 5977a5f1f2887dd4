"""
Data normalization utilities.

These modules convert extracted entity subdocuments into the target entity schema.
"""

from .entity import TargetEntityRecord, build_entity_record
from .names import parse_razon_social

__all__ = [
    'TargetEntityRecord',
    'build_entity_record',
    'parse_razon_social',
]
