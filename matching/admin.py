# matching/admin.py

from django.contrib import admin
from .models import Profile, Pet, Swipe, Match


class PetInline(admin.TabularInline):
    model = Pet
    extra = 0


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'name', 'city', 'state', 'is_verified', 'last_active_at')
    search_fields = ('name', 'user__username', 'city')
    inlines = [PetInline]


@admin.register(Swipe)
class SwipeAdmin(admin.ModelAdmin):
    list_display = ('actor', 'target', 'target_pet', 'decision', 'created_at')
    list_filter = ('decision',)


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ('profile', 'matched_profile', 'matched_at', 'is_active')
    list_filter = ('is_active',)
