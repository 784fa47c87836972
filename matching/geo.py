import math
from collections import namedtuple

from .exceptions import InvalidCoordinates

EARTH_RADIUS_MILES = 3959
METERS_PER_MILE = 1609.34

GeoPoint = namedtuple('GeoPoint', ['latitude', 'longitude'])


def validate_point(latitude, longitude):
    """
    Devuelve un GeoPoint en grados decimales o lanza InvalidCoordinates.
    """
    try:
        latitude = float(latitude)
        longitude = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinates('Latitude and longitude must be numbers')

    if math.isnan(latitude) or math.isnan(longitude):
        raise InvalidCoordinates('Latitude and longitude must be numbers')
    if abs(latitude) > 90:
        raise InvalidCoordinates(f'Latitude {latitude} is out of range [-90, 90]')
    if abs(longitude) > 180:
        raise InvalidCoordinates(f'Longitude {longitude} is out of range [-180, 180]')
    return GeoPoint(latitude, longitude)


def haversine_miles(lat1, lon1, lat2, lon2):
    """Great-circle distance in miles between two (lat, lon) pairs."""
    a_point = validate_point(lat1, lon1)
    b_point = validate_point(lat2, lon2)
    if a_point == b_point:
        return 0.0

    phi1 = math.radians(a_point.latitude)
    phi2 = math.radians(b_point.latitude)
    dphi = math.radians(b_point.latitude - a_point.latitude)
    dlambda = math.radians(b_point.longitude - a_point.longitude)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_between(a_point, b_point):
    return haversine_miles(a_point.latitude, a_point.longitude, b_point.latitude, b_point.longitude)


def miles_to_meters(miles):
    return miles * METERS_PER_MILE


def meters_to_miles(meters):
    return meters / METERS_PER_MILE


def format_distance(miles, suffix='miles away'):
    return f"{miles:.1f} {suffix}"


def bounding_box(point, radius_miles):
    """
    Caja lat/lon que contiene el círculo de radio `radius_miles`.
    Retorna (min_lat, max_lat, min_lon, max_lon); los límites de longitud
    son None cuando la caja cruza el antimeridiano o toca un polo.
    """
    angular = radius_miles / EARTH_RADIUS_MILES
    lat_delta = math.degrees(angular)
    min_lat = max(point.latitude - lat_delta, -90.0)
    max_lat = min(point.latitude + lat_delta, 90.0)

    cos_lat = math.cos(math.radians(point.latitude))
    if min_lat <= -90.0 or max_lat >= 90.0 or math.sin(angular) >= cos_lat:
        return min_lat, max_lat, None, None

    lon_delta = math.degrees(math.asin(math.sin(angular) / cos_lat))
    min_lon = point.longitude - lon_delta
    max_lon = point.longitude + lon_delta
    if min_lon < -180.0 or max_lon > 180.0:
        return min_lat, max_lat, None, None
    return min_lat, max_lat, min_lon, max_lon
