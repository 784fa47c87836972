from rest_framework import status
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from . import discovery, filters, swipes
from .geo import validate_point
from .serializers import (
    DiscoveryQuerySerializer,
    SwipeSerializer,
    SearchFiltersSerializer,
    FilteredSearchSerializer,
    LocationSerializer,
    LocationProfileSerializer,
    MatchSerializer,
)
from .store import profile_store

"""
VISTAS DE UBICACIÓN
"""

class LocationUpdateView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = LocationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        point = validate_point(data.pop('latitude'), data.pop('longitude'))

        profile = profile_store.update_location(request.user.pk, point, data)
        return Response({'success': True, 'location': LocationProfileSerializer(profile).data})

"""
VISTAS DE MATCHING
"""

class NearbyProfilesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        serializer = DiscoveryQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        result = discovery.discover_nearby(request.user.pk, **serializer.to_query())
        return Response({'success': True, **result})


class SwipeView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = SwipeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = swipes.record_swipe(
            request.user.pk,
            data['target_id'],
            data['decision'],
            pet_id=data.get('pet_id'),
        )
        status_code = status.HTTP_201_CREATED if result['is_match'] else status.HTTP_200_OK
        return Response({'success': True, **result}, status=status_code)


class MatchListView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, format=None):
        result = swipes.list_matches(request.user.pk)
        return Response({
            'success': True,
            'matches': MatchSerializer(result['matches'], many=True).data,
        })


class MatchDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, profile_id, format=None):
        result = swipes.unmatch(request.user.pk, profile_id)
        return Response({'success': True, **result})


class FilteredSearchView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = FilteredSearchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = filters.filtered_search(
            request.user.pk,
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
            filters=SearchFiltersSerializer.to_filters(data.get('filters') or {}),
        )
        return Response({'success': True, **result})
