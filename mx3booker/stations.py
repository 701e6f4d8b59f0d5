"""Noe Valley station catalog. Station ids are fixed by the booking site."""

from __future__ import annotations

from mx3booker.models import Station, StationType

# Ascending id order; reservation rows are matched against names in this order.
STATIONS: dict[int, Station] = {
    station.id: station
    for station in (
        Station(140, "Noe 1", StationType.PRIVATE_STATION, 60),
        Station(141, "Noe 2", StationType.PRIVATE_STATION, 60),
        Station(142, "Noe 3", StationType.PRIVATE_STATION, 60),
        Station(143, "Noe 4", StationType.PRIVATE_STATION, 60),
        Station(144, "Open Gym 1", StationType.OPEN_GYM, 30),
        Station(145, "Open Gym 2", StationType.OPEN_GYM, 30),
        Station(146, "Open Gym 3", StationType.OPEN_GYM, 30),
        Station(147, "Peloton", StationType.CARDIO, 30),
        Station(149, "Tread Mill", StationType.CARDIO, 30),
        Station(150, "Air Bike", StationType.CARDIO, 30),
        Station(163, "Air Rower", StationType.CARDIO, 30),
        Station(164, "Climber", StationType.CARDIO, 30),
    )
}

STATION_BY_NAME: dict[str, Station] = {
    station.name.lower(): station for station in STATIONS.values()
}


def resolve_station(reference: str | int) -> Station | None:
    """
    Resolve a station name or id against the catalog.

    Args:
        reference: Display name (any case), numeric id, or numeric string

    Returns:
        The matching station, or None if the reference is unknown
    """
    if isinstance(reference, int):
        return STATIONS.get(reference)

    reference = reference.strip()
    station = STATION_BY_NAME.get(reference.lower())
    if station is not None:
        return station

    if reference.isdigit():
        return STATIONS.get(int(reference))
    return None


def station_names() -> list[str]:
    return [station.name for station in STATIONS.values()]
