from django.urls import path
from .views import (
    LocationUpdateView,
    NearbyProfilesView,
    SwipeView,
    MatchListView,
    MatchDetailView,
    FilteredSearchView,
)

urlpatterns = [
    path('location/', LocationUpdateView.as_view(), name='location-update'),
    path('matches/', MatchListView.as_view(), name='match-list'),
    path('matches/nearby/', NearbyProfilesView.as_view(), name='match-nearby'),
    path('matches/swipe/', SwipeView.as_view(), name='match-swipe'),
    path('matches/filtered/', FilteredSearchView.as_view(), name='match-filtered'),
    path('matches/<int:profile_id>/', MatchDetailView.as_view(), name='match-detail'),
]
