from enum import Enum
from typing import Optional, Type, TypeVar
from fastapi import HTTPException

E = TypeVar("E", bound=Enum)


def parse_filter(value: Optional[str], enum_cls: Type[E], label: str) -> Optional[E]:
    """Turn a query-string filter into an enum member; ``all`` or empty means no filter."""
    if not value or value == "all":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} filter: {value}")
