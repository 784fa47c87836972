from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone

"""
MODELOS DE PERFIL (DUEÑO + MASCOTAS)
"""

class Profile(models.Model):
    class Membership(models.TextChoices):
        FREE = 'free', 'Free'
        PREMIUM = 'premium', 'Premium'

    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True)
    name = models.CharField(max_length=100)
    bio = models.TextField(blank=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    profile_images = models.JSONField(default=list, blank=True)

    # Ubicación: sin coordenadas el perfil no participa en búsquedas geográficas
    latitude = models.FloatField(
        null=True, blank=True, validators=[MinValueValidator(-90), MaxValueValidator(90)]
    )
    longitude = models.FloatField(
        null=True, blank=True, validators=[MinValueValidator(-180), MaxValueValidator(180)]
    )
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, blank=True)

    is_verified = models.BooleanField(default=False)
    is_subscribed = models.BooleanField(default=False)
    membership_type = models.CharField(max_length=10, choices=Membership.choices, default=Membership.FREE)
    last_active_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        indexes = [
            models.Index(fields=['latitude', 'longitude'], name='profile_lat_lon_idx'),
        ]

    def __str__(self):
        return self.user.username

    @property
    def has_location(self):
        return self.latitude is not None and self.longitude is not None

    @property
    def is_real_user(self):
        return self.is_verified and bool(self.profile_images)


class Pet(models.Model):
    class PetType(models.TextChoices):
        DOG = 'dog', 'Dog'
        CAT = 'cat', 'Cat'
        BIRD = 'bird', 'Bird'
        FISH = 'fish', 'Fish'
        OTHER = 'other', 'Other'

    owner = models.ForeignKey(Profile, related_name='pets', on_delete=models.CASCADE)
    name = models.CharField(max_length=100)
    pet_type = models.CharField(max_length=10, choices=PetType.choices, default=PetType.DOG)
    breed = models.CharField(max_length=100, blank=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True)
    images = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['pet_type', 'breed'], name='pet_type_breed_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.owner_id})"

"""
MODELOS DE INTERACCIÓN Y MATCHING
"""

class Swipe(models.Model):
    """
    Historial append-only de decisiones. Se permiten repeticiones
    (reintentos del cliente).
    """
    class Decision(models.TextChoices):
        LIKE = 'like', 'Like'
        PASS = 'pass', 'Pass'
        SUPERLIKE = 'superlike', 'Superlike'

    actor = models.ForeignKey(Profile, related_name='swipes', on_delete=models.CASCADE)
    target = models.ForeignKey(Profile, related_name='received_swipes', on_delete=models.CASCADE)
    target_pet = models.ForeignKey(Pet, related_name='received_swipes', null=True, blank=True, on_delete=models.SET_NULL)
    decision = models.CharField(max_length=10, choices=Decision.choices)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['actor', 'target', 'decision'], name='swipe_actor_target_idx'),
            # Búsqueda inversa: "quién me ha dado like"
            models.Index(fields=['target', 'decision'], name='swipe_target_decision_idx'),
        ]

    def __str__(self):
        return f"{self.actor_id} -{self.decision}-> {self.target_id}"


class Match(models.Model):
    """
    Un registro por lado. El par (profile, matched_profile) es único y
    nunca se borra: unmatch solo pone is_active en False.
    """
    profile = models.ForeignKey(Profile, related_name='matches', on_delete=models.CASCADE)
    matched_profile = models.ForeignKey(Profile, related_name='matched_by', on_delete=models.CASCADE)
    matched_at = models.DateTimeField()
    is_active = models.BooleanField(default=True)

    class Meta:
        unique_together = ('profile', 'matched_profile')
        ordering = ['-matched_at', 'id']
        indexes = [
            models.Index(fields=['profile', 'is_active'], name='match_profile_active_idx'),
        ]

    def __str__(self):
        return f"{self.profile_id} <-> {self.matched_profile_id}"
