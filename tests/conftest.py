import pytest
from datetime import timedelta
from django.contrib.auth.models import User
from django.utils import timezone
from rest_framework.test import APIClient

from matching.models import Profile, Pet

# Seattle downtown
SEATTLE = (47.6062, -122.3321)
NEARBY = (47.61, -122.33)


@pytest.fixture
def make_profile(db):
    created = []

    def _make(name="Owner", location=SEATTLE, pets=(), last_active_days=0, **extra):
        user = User.objects.create_user(
            username=f"user{len(created) + 1}@example.com", password="password123"
        )
        latitude, longitude = location if location else (None, None)
        profile = Profile.objects.create(
            user=user,
            name=name,
            latitude=latitude,
            longitude=longitude,
            last_active_at=timezone.now() - timedelta(days=last_active_days),
            **extra,
        )
        for pet in pets:
            Pet.objects.create(owner=profile, **pet)
        created.append(profile)
        return profile

    return _make


@pytest.fixture
def api_client():
    return APIClient()
