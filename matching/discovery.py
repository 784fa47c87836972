from datetime import timedelta

from django.conf import settings
from django.utils import timezone

from .exceptions import InvalidInput, LocationNotSet
from .geo import GeoPoint, distance_between, format_distance, miles_to_meters
from .store import profile_store

KIND_PETS = 'pets'
KIND_OWNERS = 'owners'
KINDS = (KIND_PETS, KIND_OWNERS)

"""
CONJUNTO DE EXCLUSIÓN
"""

def exclusion_query(profile_id):
    """
    El propio perfil más todo perfil que ya recibió un swipe (cualquier decisión).
    """
    return {'exclude_ids': {profile_id}, 'swiped_by': profile_id}


def active_since(now=None):
    now = now or timezone.now()
    return now - timedelta(days=settings.MATCHING_ACTIVE_WINDOW_DAYS)


def location_of(profile):
    if not profile.has_location:
        return None
    return GeoPoint(profile.latitude, profile.longitude)

"""
PARÁMETROS
"""

def clean_radius(radius_miles, error_class=InvalidInput):
    if radius_miles is None:
        return float(settings.MATCHING_DEFAULT_RADIUS_MILES)
    try:
        radius_miles = float(radius_miles)
    except (TypeError, ValueError):
        raise error_class('Radius must be a number of miles.')
    if not radius_miles > 0:
        raise error_class('Radius must be greater than 0.')
    return radius_miles


def clean_limit(limit):
    if limit is None:
        limit = settings.MATCHING_DEFAULT_LIMIT
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidInput('Limit must be an integer.')
    if limit < 1:
        raise InvalidInput('Limit must be at least 1.')
    return min(limit, settings.MATCHING_MAX_RESULTS)


def clean_kind(kind):
    kind = kind or KIND_PETS
    if kind not in KINDS:
        raise InvalidInput(f"Kind must be one of: {', '.join(KINDS)}.")
    return kind

"""
FORMATO DE CANDIDATOS
"""

def pet_candidate(profile, pet, distance_label, miles):
    return {
        'id': f"{profile.pk}_{pet.pk}",
        'profile_id': profile.pk,
        'pet_id': pet.pk,
        'name': pet.name,
        'age': pet.age,
        'type': pet.pet_type,
        'breed': pet.breed,
        'bio': pet.description,
        'images': pet.images,
        'location': distance_label,
        'distance_miles': round(miles, 2),
        'owner_name': profile.name,
        'is_verified': profile.is_verified,
        'has_subscription': profile.is_subscribed,
    }


def owner_candidate(profile, active_pets, distance_label, miles):
    return {
        'id': profile.pk,
        'profile_id': profile.pk,
        'name': profile.name,
        'age': profile.age,
        'bio': profile.bio,
        'images': profile.profile_images,
        'location': distance_label,
        'distance_miles': round(miles, 2),
        'pet_count': len(active_pets),
        'is_verified': profile.is_verified,
        'has_subscription': profile.is_subscribed,
    }


def shape_candidates(profile, miles, kind):
    """
    Un candidato por mascota activa (kind=pets) o uno por dueño.
    Con kind=pets solo el dueño sin ninguna mascota aparece como dueño; si
    todas sus mascotas están inactivas no aporta candidatos.
    """
    distance_label = format_distance(miles)
    pets = list(profile.pets.all())
    active_pets = [pet for pet in pets if pet.is_active]
    if kind == KIND_PETS and pets:
        return [pet_candidate(profile, pet, distance_label, miles) for pet in active_pets]
    return [owner_candidate(profile, active_pets, distance_label, miles)]

"""
DESCUBRIMIENTO
"""

def discover_nearby(requester_id, radius_miles=None, limit=None, kind=KIND_PETS, store=None):
    """
    Perfiles cercanos al solicitante, el más cercano primero, sin los ya vistos.

    Returns {'candidates': [...], 'total': n}. Raises LocationNotSet when
    the requester has no coordinates; the geo query is not issued then.
    """
    store = store or profile_store
    radius_miles = clean_radius(radius_miles)
    limit = clean_limit(limit)
    kind = clean_kind(kind)

    requester = store.find_by_id(requester_id)
    origin = location_of(requester)
    if origin is None:
        raise LocationNotSet()

    profiles = store.find_near(
        origin,
        miles_to_meters(radius_miles),
        active_since=active_since(),
        limit=limit,
        **exclusion_query(requester.pk),
    )

    candidates = []
    for profile in profiles:
        miles = distance_between(origin, location_of(profile))
        candidates.extend(shape_candidates(profile, miles, kind))

    return {'candidates': candidates, 'total': len(candidates)}
