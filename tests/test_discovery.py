import pytest

from matching.discovery import clean_limit, discover_nearby
from matching.exceptions import InvalidInput, LocationNotSet, ProfileNotFound
from matching.store import ProfileStore
from matching.models import Swipe
from matching.swipes import record_swipe

from conftest import NEARBY, SEATTLE


class SpyStore(ProfileStore):
    def __init__(self):
        self.near_calls = 0

    def find_near(self, *args, **kwargs):
        self.near_calls += 1
        return super().find_near(*args, **kwargs)


def miles_north(miles):
    # 1 grado de latitud ~ 69.1 millas
    return (SEATTLE[0] + miles / 69.1, SEATTLE[1])


@pytest.mark.django_db
def test_profile_without_location_gets_precondition_error(make_profile):
    requester = make_profile(name="Nowhere", location=None)
    make_profile(name="Neighbour", location=NEARBY)
    store = SpyStore()

    with pytest.raises(LocationNotSet):
        discover_nearby(requester.pk, store=store)

    # Nunca se lanza la consulta geográfica
    assert store.near_calls == 0


@pytest.mark.django_db
def test_nearby_profile_is_discovered_with_distance_label(make_profile):
    a = make_profile(name="A", location=SEATTLE)
    b = make_profile(name="B", location=NEARBY)

    result = discover_nearby(a.pk, radius_miles=10, kind='owners')

    assert result['total'] == 1
    candidate = result['candidates'][0]
    assert candidate['id'] == b.pk
    assert candidate['location'].endswith(" miles away")
    assert float(candidate['location'].split()[0]) < 1.0


@pytest.mark.django_db
def test_requester_never_discovers_itself(make_profile):
    a = make_profile(name="A")

    result = discover_nearby(a.pk, kind='owners')

    assert result == {'candidates': [], 'total': 0}


@pytest.mark.django_db
@pytest.mark.parametrize("decision", ['like', 'pass', 'superlike'])
def test_swiped_profiles_are_excluded(make_profile, decision):
    a = make_profile(name="A")
    b = make_profile(name="B", location=NEARBY)
    c = make_profile(name="C", location=miles_north(2))

    # Una consulta previa no deja el conjunto de exclusión desactualizado
    first = discover_nearby(a.pk, kind='owners')
    assert [cand['id'] for cand in first['candidates']] == [b.pk, c.pk]

    record_swipe(a.pk, b.pk, decision)

    second = discover_nearby(a.pk, kind='owners')
    assert [cand['id'] for cand in second['candidates']] == [c.pk]


@pytest.mark.django_db
def test_stale_profiles_are_excluded(make_profile):
    a = make_profile(name="A")
    make_profile(name="Stale", location=NEARBY, last_active_days=31)
    fresh = make_profile(name="Fresh", location=NEARBY, last_active_days=29)

    result = discover_nearby(a.pk, kind='owners')

    assert [cand['id'] for cand in result['candidates']] == [fresh.pk]


@pytest.mark.django_db
def test_radius_bounds_results(make_profile):
    a = make_profile(name="A")
    far = make_profile(name="Far", location=miles_north(20))

    assert discover_nearby(a.pk, radius_miles=10, kind='owners')['total'] == 0

    result = discover_nearby(a.pk, radius_miles=25, kind='owners')
    assert [cand['id'] for cand in result['candidates']] == [far.pk]


@pytest.mark.django_db
def test_profiles_without_location_never_appear(make_profile):
    a = make_profile(name="A")
    make_profile(name="Hidden", location=None)

    assert discover_nearby(a.pk, radius_miles=50, kind='owners')['total'] == 0


@pytest.mark.django_db
def test_results_are_ordered_nearest_first(make_profile):
    a = make_profile(name="A")
    # Creados fuera de orden a propósito
    make_profile(name="Five", location=miles_north(5))
    make_profile(name="One", location=miles_north(1))
    make_profile(name="Eight", location=miles_north(8))
    make_profile(name="Three", location=miles_north(3))

    result = discover_nearby(a.pk, radius_miles=10, kind='owners')

    names = [cand['name'] for cand in result['candidates']]
    distances = [cand['distance_miles'] for cand in result['candidates']]
    assert names == ["One", "Three", "Five", "Eight"]
    assert distances == sorted(distances)


@pytest.mark.django_db
def test_limit_applies_to_nearest_profiles(make_profile):
    a = make_profile(name="A")
    for miles in (4, 1, 3, 2):
        make_profile(name=f"P{miles}", location=miles_north(miles))

    result = discover_nearby(a.pk, limit=2, kind='owners')

    assert [cand['name'] for cand in result['candidates']] == ["P1", "P2"]


@pytest.mark.django_db
def test_pet_kind_expands_active_pets(make_profile):
    a = make_profile(name="A")
    b = make_profile(name="B", location=NEARBY, pets=[
        {'name': "Rex", 'pet_type': 'dog', 'breed': "Beagle"},
        {'name': "Tom", 'pet_type': 'cat', 'breed': "Siamese"},
        {'name': "Old", 'pet_type': 'dog', 'is_active': False},
    ])

    result = discover_nearby(a.pk, kind='pets')

    assert result['total'] == 2
    rex, tom = result['candidates']
    assert rex['name'] == "Rex"
    assert tom['name'] == "Tom"
    assert rex['profile_id'] == b.pk
    assert rex['id'] == f"{b.pk}_{rex['pet_id']}"
    assert rex['owner_name'] == "B"


@pytest.mark.django_db
def test_owner_kind_yields_one_record_per_profile(make_profile):
    a = make_profile(name="A")
    make_profile(name="B", location=NEARBY, pets=[
        {'name': "Rex", 'pet_type': 'dog'},
        {'name': "Tom", 'pet_type': 'cat'},
    ])

    result = discover_nearby(a.pk, kind='owners')

    assert result['total'] == 1
    assert result['candidates'][0]['pet_count'] == 2


@pytest.mark.django_db
def test_pet_kind_falls_back_to_owner_without_pets(make_profile):
    a = make_profile(name="A")
    b = make_profile(name="B", location=NEARBY)

    result = discover_nearby(a.pk, kind='pets')

    assert result['candidates'][0]['id'] == b.pk
    assert result['candidates'][0]['pet_count'] == 0


@pytest.mark.django_db
@pytest.mark.parametrize("kwargs", [
    {'radius_miles': 0},
    {'radius_miles': -5},
    {'radius_miles': "far"},
    {'limit': 0},
    {'kind': "cats"},
])
def test_invalid_parameters_are_rejected(make_profile, kwargs):
    a = make_profile(name="A")

    with pytest.raises(InvalidInput):
        discover_nearby(a.pk, **kwargs)


def test_limit_is_capped(settings):
    settings.MATCHING_MAX_RESULTS = 50

    assert clean_limit(500) == 50
    assert clean_limit(None) == settings.MATCHING_DEFAULT_LIMIT


@pytest.mark.django_db
def test_unknown_requester_is_not_found():
    with pytest.raises(ProfileNotFound):
        discover_nearby(987654)


class SwipeAfterReadStore(ProfileStore):
    """Registra un swipe justo después de que la consulta geográfica devuelve."""

    def __init__(self, actor_id, target_id):
        self.actor_id = actor_id
        self.target_id = target_id

    def find_near(self, *args, **kwargs):
        profiles = super().find_near(*args, **kwargs)
        record_swipe(self.actor_id, self.target_id, 'pass')
        return profiles


@pytest.mark.django_db
def test_swipe_during_discovery_is_excluded_on_next_call(make_profile):
    a = make_profile(name="A")
    b = make_profile(name="B", location=NEARBY)

    racing = discover_nearby(a.pk, kind='owners', store=SwipeAfterReadStore(a.pk, b.pk))
    assert [cand['id'] for cand in racing['candidates']] == [b.pk]

    assert discover_nearby(a.pk, kind='owners')['total'] == 0


@pytest.mark.django_db
def test_swipe_written_elsewhere_is_excluded_immediately(make_profile):
    a = make_profile(name="A")
    b = make_profile(name="B", location=NEARBY)
    assert discover_nearby(a.pk, kind='owners')['total'] == 1

    # Otro worker escribe directamente en la base de datos
    Swipe.objects.create(actor=a, target=b, decision=Swipe.Decision.LIKE)

    assert discover_nearby(a.pk, kind='owners')['total'] == 0


@pytest.mark.django_db
def test_pet_kind_skips_owner_whose_pets_are_all_inactive(make_profile):
    a = make_profile(name="A")
    make_profile(name="B", location=NEARBY, pets=[
        {'name': "Old", 'pet_type': 'dog', 'is_active': False},
    ])

    assert discover_nearby(a.pk, kind='pets') == {'candidates': [], 'total': 0}

    owners = discover_nearby(a.pk, kind='owners')
    assert owners['total'] == 1
    assert owners['candidates'][0]['pet_count'] == 0
