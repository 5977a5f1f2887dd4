"""
Person name normalization.

Legal names of individuals arrive as "apellido1,apellido2,apellido3,nombre1,nombre2";
the target schema wants them as "nombre1 nombre2 apellido1 apellido2 apellido3".
"""

import re
from typing import Optional

# Four commas on a single line (\r, \u2028 and \u2029 also end a line)
_LINE = r"[^\n\r\u2028\u2029]*"
RAZON_SOCIAL_PATTERN = re.compile(",".join([_LINE] * 5))


def parse_razon_social(value) -> Optional[str]:
    """
    Reorder a comma-separated individual's name into given names first.

    Only the first five segments are used; empty second given name and second
    or third surname are dropped along with their separating space.

    >>> parse_razon_social("Gomez,Perez,,Juan,Carlos")
    'Juan Carlos Gomez Perez'
    >>> parse_razon_social("OnlyOneSegment") is None
    True
    """
    if not isinstance(value, str) or not RAZON_SOCIAL_PATTERN.search(value):
        return None

    apellido1, apellido2, apellido3, nombre1, nombre2 = value.split(",")[:5]

    name = nombre1
    if nombre2:
        name += " " + nombre2
    name += " " + apellido1
    if apellido2:
        name += " " + apellido2
    if apellido3:
        name += " " + apellido3
    return name
