import logging

from django.utils import timezone

from .exceptions import InvalidDecision, InvalidInput, MatchNotFound, StoreUnavailable
from .models import Swipe
from .store import LIKE_DECISIONS, profile_store

logger = logging.getLogger(__name__)

TARGET_SEPARATOR = '_'

"""
UTILIDADES
"""

def send_match_notification(actor, target):
    # La entrega de notificaciones vive fuera de este servicio
    logger.info("Match formed between profile %s (%s) and profile %s (%s)", actor.pk, actor.name, target.pk, target.name)


def _to_id(value, label):
    if isinstance(value, bool):
        raise InvalidInput(f'{label} must be an integer id.')
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidInput(f'{label} must be an integer id.')


def parse_target(target_id, pet_id=None):
    """
    Resuelve el destino del swipe a (profile_id, pet_id).

    Accepts the structured form (target_id + pet_id) and the legacy
    compound "<profile>_<pet>" string, split on the first separator.
    """
    if target_id is None or target_id == '':
        raise InvalidInput('target_id is required.')

    profile_part = target_id
    if isinstance(target_id, str) and TARGET_SEPARATOR in target_id:
        profile_part, pet_part = target_id.split(TARGET_SEPARATOR, 1)
        if pet_id is None and pet_part:
            pet_id = pet_part

    profile_id = _to_id(profile_part, 'target_id')
    if pet_id is not None and pet_id != '':
        pet_id = _to_id(pet_id, 'pet_id')
    else:
        pet_id = None
    return profile_id, pet_id


def clean_decision(decision):
    if decision not in Swipe.Decision.values:
        raise InvalidDecision()
    return decision

"""
REPARACIÓN DE MATCHES ASIMÉTRICOS
"""

def heal_pair(match, store=None):
    """
    Crea el lado espejo de `match` si falta, con el mismo timestamp y estado.
    """
    store = store or profile_store
    mirror, created = store.append_match(match.matched_profile_id, {
        'matched_profile_id': match.profile_id,
        'timestamp': match.matched_at,
        'is_active': match.is_active,
    })
    if created:
        logger.info("Repaired one-sided match %s -> %s", match.profile_id, match.matched_profile_id)
    return created


def repair_one_sided_matches(profile_id=None, store=None):
    store = store or profile_store
    repaired = 0
    for match in store.one_sided_matches(profile_id):
        if heal_pair(match, store):
            repaired += 1
    return repaired

"""
DETECCIÓN DE MATCH
"""

def detect_match(actor_id, target_id, store=None):
    """
    Retorna True solo si este llamado creó el match.

    A pass by either profile blocks the pair for good. An existing match
    record for the pair (active or not) means nothing new is created; its
    missing mirror side, if any, is written instead.
    """
    store = store or profile_store

    if store.has_passed(actor_id, target_id) or store.has_passed(target_id, actor_id):
        return False
    if not store.has_liked(target_id, actor_id):
        return False

    # Cualquiera de los dos lados cuenta: el otro puede haber quedado sin escribir
    existing = store.get_match(actor_id, target_id) or store.get_match(target_id, actor_id)
    if existing is not None:
        logger.debug("Match %s -> %s already recorded", actor_id, target_id)
        heal_pair(existing, store)
        return False

    timestamp = timezone.now()
    actor_side, created = store.append_match(actor_id, {
        'matched_profile_id': target_id,
        'timestamp': timestamp,
    })
    if not created:
        # Otra petición concurrente escribió primero
        heal_pair(actor_side, store)
        return False

    try:
        store.append_match(target_id, {
            'matched_profile_id': actor_id,
            'timestamp': timestamp,
        })
    except StoreUnavailable:
        logger.warning(
            "Match %s -> %s written on one side only; it will be repaired on next read",
            actor_id, target_id,
        )
    return True

"""
SWIPES Y MATCHES
"""

def record_swipe(actor_id, target_id, decision, pet_id=None, store=None):
    """
    Registra un swipe y evalúa si forma match.

    Returns {'is_match': bool, 'decision': str}. Repeated swipes on the
    same target are recorded; they never create a second match.
    """
    store = store or profile_store
    decision = clean_decision(decision)
    profile_id, pet_id = parse_target(target_id, pet_id)

    actor = store.find_by_id(actor_id)
    if profile_id == actor.pk:
        raise InvalidInput('Cannot swipe on your own profile.')
    target = store.find_by_id(profile_id)
    if pet_id is not None:
        store.find_pet(target.pk, pet_id)
    repair_one_sided_matches(actor.pk, store)
    repair_one_sided_matches(target.pk, store)

    now = timezone.now()
    store.append_swipe(actor.pk, {
        'target_id': target.pk,
        'target_pet_id': pet_id,
        'decision': decision,
        'timestamp': now,
    })
    store.touch(actor.pk, now)

    is_match = False
    if decision in LIKE_DECISIONS:
        is_match = detect_match(actor.pk, target.pk, store)
        if is_match:
            send_match_notification(actor, target)

    return {'is_match': is_match, 'decision': decision}


def list_matches(profile_id, store=None):
    store = store or profile_store
    profile = store.find_by_id(profile_id)
    repair_one_sided_matches(profile.pk, store)

    matches = []
    for match in store.active_matches(profile.pk):
        other = match.matched_profile
        matches.append({
            'id': other.pk,
            'name': other.name,
            'image': other.profile_images[0] if other.profile_images else '',
            'timestamp': match.matched_at,
        })
    return {'matches': matches}


def unmatch(profile_id, other_id, store=None):
    """Desactiva ambos lados del match; el historial se conserva."""
    store = store or profile_store
    profile = store.find_by_id(profile_id)
    other_id = _to_id(other_id, 'profile_id')

    match = store.get_match(profile.pk, other_id) or store.get_match(other_id, profile.pk)
    if match is None:
        raise MatchNotFound(other_id)
    heal_pair(match, store)
    store.deactivate_pair(profile.pk, other_id)
    logger.info("Profile %s unmatched profile %s", profile.pk, other_id)
    return {'unmatched': True, 'profile_id': other_id}
