# geo_utils.py
import math

EARTH_RADIUS_M = 6371000
METERS_PER_DEGREE = 111111.0
METRO_RADIUS_M = 100000


def haversine_distance(lat1, lon1, lat2, lon2):
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dlambda/2)**2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1-a))


def equirectangular_offset(seed_lat, seed_lng, lat, lng):
    """(east, north) meters from the seed; flat-earth, valid at city scale."""
    north = (lat - seed_lat) * METERS_PER_DEGREE
    east = (lng - seed_lng) * METERS_PER_DEGREE * math.cos(math.radians(seed_lat))
    return east, north


def offset_to_lat_lng(seed_lat, seed_lng, east, north):
    lat = seed_lat + north / METERS_PER_DEGREE
    lng = seed_lng + east / (METERS_PER_DEGREE * math.cos(math.radians(seed_lat)))
    return lat, lng


def is_within_metro(seed_lat, seed_lng, lat, lng, radius_m=METRO_RADIUS_M):
    return haversine_distance(seed_lat, seed_lng, lat, lng) <= radius_m
