from django.conf import settings
from django.db.models import Q
from django.utils import timezone

from .discovery import active_since, clean_radius, exclusion_query, location_of
from .exceptions import InvalidCoordinates, InvalidFilter
from .geo import distance_between, format_distance, miles_to_meters, validate_point
from .models import Pet
from .store import profile_store

# Rango de edad en años [min, max)
AGE_BRACKETS = {
    'puppy': (0, 1),
    'young': (1, 3),
    'adult': (3, 7),
    'senior': (7, 100),
}

PLACEHOLDER_IMAGE = 'https://images.unsplash.com/photo-1544568100-847a948585b9?w=400'

"""
UTILIDADES DE FECHA
"""

def years_ago(today, years):
    try:
        return today.replace(year=today.year - years)
    except ValueError:
        # 29 de febrero en un año no bisiesto
        return today.replace(year=today.year - years, day=28)


def birth_date_range(age_range, today=None):
    """
    Traduce un rango de edad a (min_birth_date, max_birth_date), ambos inclusivos.
    """
    if age_range not in AGE_BRACKETS:
        raise InvalidFilter(f"Age range must be one of: {', '.join(AGE_BRACKETS)}.")
    today = today or timezone.localdate()
    min_age, max_age = AGE_BRACKETS[age_range]
    return years_ago(today, max_age), years_ago(today, min_age)


def age_label(birth_date, today=None):
    if not birth_date:
        return 'Unknown age'
    today = today or timezone.localdate()
    years = int((today - birth_date).days // 365.25)
    return f"{years} years"


def format_time_ago(moment, now=None):
    now = now or timezone.now()
    diff = now - moment
    minutes = int(diff.total_seconds() // 60)
    hours = minutes // 60
    days = hours // 24

    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if days < 7:
        return f"{days} day{'s' if days > 1 else ''} ago"
    return moment.date().isoformat()


def stable_partition(items, predicate):
    """Los que cumplen `predicate` primero; el orden relativo se mantiene."""
    return sorted(items, key=lambda item: not predicate(item))

"""
VALIDACIÓN DE FILTROS
"""

def clean_filters(filters):
    filters = dict(filters or {})
    cleaned = {}

    if filters.get('radius') is not None:
        cleaned['radius'] = clean_radius(filters['radius'], error_class=InvalidFilter)

    for key in ('city', 'state', 'breed'):
        value = filters.get(key)
        if value is None or value == '':
            continue
        if not isinstance(value, str):
            raise InvalidFilter(f"Filter '{key}' must be a string.")
        cleaned[key] = value.strip()

    pet_type = filters.get('pet_type')
    if pet_type:
        if pet_type not in Pet.PetType.values:
            raise InvalidFilter(f"Pet type must be one of: {', '.join(Pet.PetType.values)}.")
        cleaned['pet_type'] = pet_type

    age_range = filters.get('age_range')
    if age_range:
        if age_range not in AGE_BRACKETS:
            raise InvalidFilter(f"Age range must be one of: {', '.join(AGE_BRACKETS)}.")
        cleaned['age_range'] = age_range

    cleaned['prioritize_real_users'] = bool(filters.get('prioritize_real_users', False))
    return cleaned


def resolve_origin(requester, latitude, longitude, radius):
    if latitude is not None or longitude is not None:
        if latitude is None or longitude is None:
            raise InvalidCoordinates('Latitude and longitude must be provided together.')
        return validate_point(latitude, longitude)
    if radius is not None:
        # Sin coordenadas explícitas se usa la ubicación guardada
        return location_of(requester)
    return None

"""
PREDICADOS
"""

def store_predicate(filters):
    """Lo que la base de datos puede resolver directamente."""
    predicate = Q()
    if 'city' in filters:
        predicate &= Q(city__icontains=filters['city'])
    if 'state' in filters:
        predicate &= Q(state__iexact=filters['state'])

    pet_lookup = {}
    if 'pet_type' in filters:
        pet_lookup['pets__pet_type'] = filters['pet_type']
    if 'breed' in filters:
        pet_lookup['pets__breed__icontains'] = filters['breed'].replace('_', ' ')
    if pet_lookup:
        # Un único Q: tipo y raza deben cumplirse en la misma mascota activa
        predicate &= Q(pets__is_active=True, **pet_lookup)
    return predicate


def pet_matches(pet, filters, birth_range):
    if not pet.is_active:
        return False
    if 'pet_type' in filters and pet.pet_type != filters['pet_type']:
        return False
    if 'breed' in filters and filters['breed'].replace('_', ' ').lower() not in pet.breed.lower():
        return False
    if birth_range is not None:
        min_birth, max_birth = birth_range
        if pet.birth_date is None or not (min_birth <= pet.birth_date <= max_birth):
            return False
    return True

"""
FORMATO
"""

def primary_pet(profile):
    for pet in profile.pets.all():
        if pet.is_active:
            return pet
    return None


def format_result(profile, origin, now):
    pet = primary_pet(profile)
    profile_location = location_of(profile)
    if origin is not None and profile_location is not None:
        distance = format_distance(distance_between(origin, profile_location), suffix='miles')
    else:
        distance = 'Unknown'

    is_real = profile.is_real_user
    return {
        'id': profile.pk,
        'name': pet.name if pet else profile.name,
        'age': age_label(pet.birth_date, now.date()) if pet else 'Unknown age',
        'breed': pet.breed if pet else 'Unknown breed',
        'pet_type': pet.pet_type if pet else 'unknown',
        'distance': distance,
        'images': profile.profile_images or [PLACEHOLDER_IMAGE],
        'owner': {
            'name': profile.name,
            'is_member': profile.membership_type != profile.Membership.FREE,
            'is_verified': profile.is_verified,
            'is_real': is_real,
        },
        'last_seen': format_time_ago(profile.last_active_at, now) if profile.last_active_at else 'Unknown',
        'is_real_user': is_real,
    }

"""
BÚSQUEDA FILTRADA
"""

def filtered_search(requester_id, latitude=None, longitude=None, filters=None, store=None):
    """
    Búsqueda avanzada: radio, ciudad, estado, tipo, raza y rango de edad.

    Age brackets are applied after the store query since they need the
    current date. Results are capped at MATCHING_MAX_RESULTS.
    """
    store = store or profile_store
    cleaned = clean_filters(filters)
    requester = store.find_by_id(requester_id)
    origin = resolve_origin(requester, latitude, longitude, cleaned.get('radius'))

    now = timezone.now()
    birth_range = birth_date_range(cleaned['age_range'], now.date()) if 'age_range' in cleaned else None
    cap = settings.MATCHING_MAX_RESULTS
    store_limit = None if birth_range else cap

    query = {
        'active_since': active_since(now),
        'limit': store_limit,
        **exclusion_query(requester.pk),
    }
    predicate = store_predicate(cleaned)
    if origin is not None and 'radius' in cleaned:
        profiles = store.find_near(origin, miles_to_meters(cleaned['radius']), predicate=predicate, **query)
    else:
        profiles = store.find_by_predicate(predicate, **query)

    if birth_range is not None:
        profiles = [
            profile for profile in profiles
            if any(pet_matches(pet, cleaned, birth_range) for pet in profile.pets.all())
        ]
    profiles = profiles[:cap]

    if cleaned['prioritize_real_users']:
        profiles = stable_partition(profiles, lambda profile: profile.is_real_user)

    results = [format_result(profile, origin, now) for profile in profiles]
    return {
        'matches': results,
        'count': len(results),
        'filters': cleaned,
    }
