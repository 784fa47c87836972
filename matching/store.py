import logging
from functools import wraps

from django.db import OperationalError
from django.db.models import Exists, OuterRef, Q
from django.utils import timezone

from .exceptions import PetNotFound, ProfileNotFound, StoreUnavailable
from .geo import bounding_box, haversine_miles, meters_to_miles, miles_to_meters
from .models import Match, Pet, Profile, Swipe

logger = logging.getLogger(__name__)

LIKE_DECISIONS = (Swipe.Decision.LIKE, Swipe.Decision.SUPERLIKE)


def _guarded(method):
    """
    Traduce timeouts y caídas de conexión a StoreUnavailable (reintentable).
    """
    @wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except OperationalError as exc:
            logger.warning("Profile store call %s failed: %s", method.__name__, exc)
            raise StoreUnavailable() from exc
    return wrapper


class ProfileStore:
    """
    Acceso a perfiles, historial de swipes y matches.

    Each append is a single-row write, so it is atomic on its own. The
    two sides of a match are two independent appends.
    """

    # --- Lecturas ---

    @_guarded
    def find_by_id(self, profile_id):
        try:
            return Profile.objects.select_related('user').get(pk=profile_id)
        except (Profile.DoesNotExist, ValueError, TypeError):
            raise ProfileNotFound(profile_id)

    @_guarded
    def find_pet(self, profile_id, pet_id):
        try:
            return Pet.objects.get(pk=pet_id, owner_id=profile_id)
        except (Pet.DoesNotExist, ValueError, TypeError):
            raise PetNotFound(pet_id)

    @_guarded
    def find_near(self, point, radius_meters, exclude_ids=(), active_since=None, limit=None, predicate=None,
                  swiped_by=None):
        """
        Perfiles dentro de `radius_meters` de `point`, el más cercano primero.
        La caja lat/lon se resuelve en la base de datos; el radio exacto y
        el orden se calculan con haversine.
        """
        min_lat, max_lat, min_lon, max_lon = bounding_box(point, meters_to_miles(radius_meters))
        queryset = self._base_queryset(exclude_ids, active_since, predicate, swiped_by).filter(
            latitude__isnull=False,
            longitude__isnull=False,
            latitude__range=(min_lat, max_lat),
        )
        if min_lon is not None:
            queryset = queryset.filter(longitude__range=(min_lon, max_lon))

        ranked = []
        for profile in queryset:
            miles = haversine_miles(point.latitude, point.longitude, profile.latitude, profile.longitude)
            if miles_to_meters(miles) <= radius_meters:
                ranked.append((miles, profile.pk, profile))
        ranked.sort(key=lambda item: (item[0], item[1]))

        profiles = [profile for _, _, profile in ranked]
        return profiles[:limit] if limit else profiles

    @_guarded
    def find_by_predicate(self, predicate, limit=None, exclude_ids=(), active_since=None, swiped_by=None):
        queryset = self._base_queryset(exclude_ids, active_since, predicate, swiped_by).order_by('-last_active_at', 'pk')
        if limit:
            queryset = queryset[:limit]
        return list(queryset)

    def _base_queryset(self, exclude_ids, active_since, predicate, swiped_by=None):
        """
        `swiped_by` excluye todo perfil que ese perfil ya swipeó, en la misma
        consulta (anti-join sobre swipe_actor_target_idx).
        """
        queryset = Profile.objects.all()
        if predicate is not None:
            queryset = queryset.filter(predicate).distinct()
        if exclude_ids:
            queryset = queryset.exclude(pk__in=list(exclude_ids))
        if swiped_by is not None:
            swiped = Swipe.objects.filter(actor_id=swiped_by, target_id=OuterRef('pk'))
            queryset = queryset.filter(~Exists(swiped))
        if active_since is not None:
            queryset = queryset.filter(last_active_at__gte=active_since)
        return queryset.select_related('user').prefetch_related('pets')

    @_guarded
    def has_liked(self, actor_id, target_id):
        return Swipe.objects.filter(
            actor_id=actor_id, target_id=target_id, decision__in=LIKE_DECISIONS
        ).exists()

    @_guarded
    def has_passed(self, actor_id, target_id):
        return Swipe.objects.filter(
            actor_id=actor_id, target_id=target_id, decision=Swipe.Decision.PASS
        ).exists()

    @_guarded
    def get_match(self, profile_id, other_id):
        return Match.objects.filter(profile_id=profile_id, matched_profile_id=other_id).first()

    @_guarded
    def active_matches(self, profile_id):
        return list(
            Match.objects.filter(profile_id=profile_id, is_active=True).select_related('matched_profile')
        )

    @_guarded
    def one_sided_matches(self, profile_id=None):
        mirror = Match.objects.filter(profile_id=OuterRef('matched_profile_id'), matched_profile_id=OuterRef('profile_id'))
        queryset = Match.objects.filter(~Exists(mirror))
        if profile_id is not None:
            queryset = queryset.filter(Q(profile_id=profile_id) | Q(matched_profile_id=profile_id))
        return list(queryset)

    # --- Escrituras ---

    @_guarded
    def append_swipe(self, profile_id, entry):
        return Swipe.objects.create(
            actor_id=profile_id,
            target_id=entry['target_id'],
            target_pet_id=entry.get('target_pet_id'),
            decision=entry['decision'],
            created_at=entry.get('timestamp') or timezone.now(),
        )

    @_guarded
    def append_match(self, profile_id, entry):
        """
        Inserta el lado `profile_id` de un match si aún no existe.
        Retorna (match, created); la restricción única resuelve carreras.
        """
        return Match.objects.get_or_create(
            profile_id=profile_id,
            matched_profile_id=entry['matched_profile_id'],
            defaults={
                'matched_at': entry['timestamp'],
                'is_active': entry.get('is_active', True),
            },
        )

    @_guarded
    def deactivate_pair(self, profile_id, other_id):
        return Match.objects.filter(
            Q(profile_id=profile_id, matched_profile_id=other_id)
            | Q(profile_id=other_id, matched_profile_id=profile_id)
        ).update(is_active=False)

    @_guarded
    def touch(self, profile_id, when=None):
        Profile.objects.filter(pk=profile_id).update(last_active_at=when or timezone.now())

    @_guarded
    def update_location(self, profile_id, point, address_fields):
        updated = Profile.objects.filter(pk=profile_id).update(
            latitude=point.latitude,
            longitude=point.longitude,
            last_active_at=timezone.now(),
            **address_fields,
        )
        if not updated:
            raise ProfileNotFound(profile_id)
        return self.find_by_id(profile_id)


profile_store = ProfileStore()
