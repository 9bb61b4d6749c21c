import math

from backend.models.institution import Institution

EARTH_RADIUS_KM = 6371.0


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres (haversine)."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def format_distance(distance_km: float) -> str:
    if distance_km < 1:
        return f'{round(distance_km * 1000)}m'
    return f'{distance_km:.1f}km'


def institutions_near(
    institutions: list[Institution],
    latitude: float,
    longitude: float,
    radius_km: float,
) -> list[tuple[Institution, float]]:
    nearby = []
    for institution in institutions:
        distance = calculate_distance(
            latitude,
            longitude,
            institution.address.latitude,
            institution.address.longitude,
        )
        if distance <= radius_km:
            nearby.append((institution, distance))
    return sorted(nearby, key=lambda item: item[1])
