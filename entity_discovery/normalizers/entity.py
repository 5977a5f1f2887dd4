"""
Projection of entity subdocuments onto the target entity schema.
"""

import json
from typing import Any, Optional

from pydantic import BaseModel

from .names import parse_razon_social


INDIVIDUAL = "INDIVIDUAL"

# Marks a member that is not there at all, as opposed to a JSON null
MISSING = object()


class TargetEntityRecord(BaseModel):
    """
    Entity record in the target schema.

    Only assigned fields are serialized; a field set to None is written as null.
    Field order is the output key order.
    """

    nombre_razon_social: Optional[Any] = None
    nit: str
    adjudicado: bool = True
    tipo_organizacion: Optional[Any] = None
    nombre_persona: Optional[str] = None
    departamento: Optional[Any] = None
    municipio: Optional[Any] = None
    direccion: Optional[Any] = None
    telefono: Optional[Any] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)

    def to_json_line(self) -> str:
        """Compact JSON with non-ASCII characters kept, plus a trailing newline."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n"


def get_path(value: Any, *keys: str) -> Any:
    """Follow object keys, returning MISSING as soon as one is absent."""
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            return MISSING
        value = value[key]
    return value


def is_truthy(value: Any) -> bool:
    """
    Presence test for optional source fields.

    Missing, null, false, zero and the empty string count as absent; any
    object or array counts as present, even an empty one.
    """
    if value is MISSING or value is None or value is False:
        return False
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, (int, float, str)):
        return bool(value) and value == value  # NaN is absent too
    return True


def build_entity_record(entity_id: str, subdoc: Any) -> TargetEntityRecord:
    """
    Build the target record for an entity not yet present in the index.

    Args:
        entity_id: Dedup key, written as the tax id (nit)
        subdoc: Extracted entity subdocument (None when there was none)

    Returns:
        TargetEntityRecord with only the fields the subdocument provides
    """
    fields: dict[str, Any] = {"nit": entity_id, "adjudicado": True}

    name = get_path(subdoc, "name")
    if name is not MISSING:
        fields["nombre_razon_social"] = name

    description = get_path(subdoc, "details", "legalEntityTypeDetail", "description")
    if is_truthy(description):
        fields["tipo_organizacion"] = description
        if description == INDIVIDUAL:
            fields["nombre_persona"] = parse_razon_social(fields.get("nombre_razon_social"))

    address = get_path(subdoc, "address")
    if is_truthy(address):
        for target, source in (
            ("departamento", "region"),
            ("municipio", "locality"),
            ("direccion", "streetAddress"),
        ):
            value = get_path(address, source)
            if value is not MISSING:
                fields[target] = value

    telephone = get_path(subdoc, "contactPoint", "telephone")
    if is_truthy(telephone):
        fields["telefono"] = telephone

    return TargetEntityRecord(**fields)
