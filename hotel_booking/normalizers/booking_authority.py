"""
Extraction of the reservation id from booking authority responses.

The authority has answered in PascalCase and in camelCase over time, and
some deployments wrap the reservation in an envelope, so keys are matched
case-insensitively and a handful of envelopes are searched.
"""

from __future__ import annotations

from typing import Any, Optional

ID_KEYS = ("idreserva", "id_reserva", "reservationid", "reservation_id", "id")
ENVELOPE_KEYS = ("reserva", "reservation", "result", "data")


def _lookup(payload: dict[str, Any], keys: tuple[str, ...]) -> Any:
    lowered = {str(k).lower(): v for k, v in payload.items()}
    for key in keys:
        if key in lowered and lowered[key] is not None:
            return lowered[key]
    return None


def _as_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def extract_reservation_id(payload: Any) -> Optional[int]:
    """
    Return the reservation id carried by a booking authority response.

    Args:
        payload: Decoded JSON body (anything else yields None)

    Returns:
        Optional[int]: A positive reservation id, or None if none can be determined

    Example:
        >>> extract_reservation_id({"IdReserva": 42, "CostoTotalReserva": 150.5})
        42
        >>> extract_reservation_id({"data": {"reservation_id": "7"}})
        7
        >>> extract_reservation_id({"idReserva": 0}) is None
        True
    """
    if not isinstance(payload, dict):
        return None

    found = _as_positive_int(_lookup(payload, ID_KEYS))
    if found is not None:
        return found

    for envelope in ENVELOPE_KEYS:
        nested = _lookup(payload, (envelope,))
        if isinstance(nested, dict):
            found = _as_positive_int(_lookup(nested, ID_KEYS))
            if found is not None:
                return found
    return None
