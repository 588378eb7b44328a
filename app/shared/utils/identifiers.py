# app/shared/utils/identifiers.py
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

NUMERIC_ID_PATTERN = re.compile(r"^[0-9]+$")
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE
)


class LookupKind(str, Enum):
    ID = "id"
    UUID = "uuid"


@dataclass(frozen=True)
class LookupKey:
    """Identificador público de un registro: id numérico o UUID"""
    kind: LookupKind
    value: Union[int, str]

    @classmethod
    def for_id(cls, record_id: int) -> "LookupKey":
        return cls(LookupKind.ID, int(record_id))

    def __str__(self) -> str:
        return str(self.value)


def parse_lookup_key(raw: Union[str, int, None]) -> Optional[LookupKey]:
    """
    Resolver el tipo de identificador.

    Primero se prueba la forma numérica y luego la forma UUID.
    Devuelve None si no coincide con ninguna.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return LookupKey.for_id(raw) if raw >= 0 else None

    value = str(raw).strip()
    if NUMERIC_ID_PATTERN.match(value):
        return LookupKey.for_id(int(value))
    if UUID_PATTERN.match(value):
        return LookupKey(LookupKind.UUID, value.lower())
    return None
