"""
Identifier parsing

Every record is keyed by a UUID. Anything that does not parse as one is
rejected with InvalidIdentifierError before the database is queried.
"""
from typing import Iterable, List, Union
from uuid import UUID

from app.core.exceptions import InvalidIdentifierError


def is_valid_id(value: Union[str, UUID, None]) -> bool:
    if isinstance(value, UUID):
        return True
    if not value:
        return False
    try:
        UUID(str(value))
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def parse_id(value: Union[str, UUID, None], label: str) -> UUID:
    """
    Parse an identifier or raise InvalidIdentifierError

    Args:
        value: Raw identifier from a path, query or body
        label: Entity name used in the error message ("Product", "Order", ...)

    Returns:
        The identifier as a UUID
    """
    if not is_valid_id(value):
        raise InvalidIdentifierError(f"Invalid {label} Id")
    return value if isinstance(value, UUID) else UUID(str(value))


def parse_id_list(raw: str, label: str) -> List[UUID]:
    """Parse a comma-separated id list such as ?categories=a,b; blanks are ignored"""
    return parse_ids((part.strip() for part in raw.split(",") if part.strip()), label)


def parse_ids(values: Iterable[Union[str, UUID]], label: str) -> List[UUID]:
    return [parse_id(value, label) for value in values]
