from rest_framework import serializers

from .models import Profile

"""
SERIALIZERS DE ENTRADA
Solo validan forma y tipos; las reglas de negocio (decisiones permitidas,
radio > 0, rangos de edad) las aplica el motor de matching.
"""

class DiscoveryQuerySerializer(serializers.Serializer):
    kind = serializers.CharField(required=False, allow_blank=True)
    # 'type' y 'distance' son los nombres que usa el frontend
    type = serializers.CharField(required=False, allow_blank=True)
    distance = serializers.FloatField(required=False)
    radius = serializers.FloatField(required=False)
    limit = serializers.IntegerField(required=False)

    def to_query(self):
        data = self.validated_data
        radius = data.get('radius', data.get('distance'))
        return {
            'kind': data.get('kind') or data.get('type') or None,
            'radius_miles': radius,
            'limit': data.get('limit'),
        }


class SwipeSerializer(serializers.Serializer):
    target_id = serializers.CharField(required=False)
    profileId = serializers.CharField(required=False)
    pet_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    decision = serializers.CharField(required=False, allow_blank=True)
    action = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        target_id = attrs.get('target_id') or attrs.get('profileId')
        if not target_id:
            raise serializers.ValidationError({'target_id': 'This field is required.'})
        attrs['target_id'] = target_id
        attrs['decision'] = attrs.get('decision') or attrs.get('action')
        return attrs


class SearchFiltersSerializer(serializers.Serializer):
    radius = serializers.FloatField(required=False, allow_null=True)
    city = serializers.CharField(required=False, allow_blank=True)
    state = serializers.CharField(required=False, allow_blank=True)
    pet_type = serializers.CharField(required=False, allow_blank=True)
    petType = serializers.CharField(required=False, allow_blank=True)
    breed = serializers.CharField(required=False, allow_blank=True)
    age_range = serializers.CharField(required=False, allow_blank=True)
    ageRange = serializers.CharField(required=False, allow_blank=True)
    prioritize_real_users = serializers.BooleanField(required=False)
    prioritizeRealUsers = serializers.BooleanField(required=False)

    @staticmethod
    def to_filters(data):
        return {
            'radius': data.get('radius'),
            'city': data.get('city'),
            'state': data.get('state'),
            'pet_type': data.get('pet_type') or data.get('petType'),
            'breed': data.get('breed'),
            'age_range': data.get('age_range') or data.get('ageRange'),
            'prioritize_real_users': data.get('prioritize_real_users', data.get('prioritizeRealUsers', False)),
        }


class FilteredSearchSerializer(serializers.Serializer):
    latitude = serializers.FloatField(required=False, allow_null=True)
    longitude = serializers.FloatField(required=False, allow_null=True)
    filters = SearchFiltersSerializer(required=False)


class LocationSerializer(serializers.Serializer):
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    address = serializers.CharField(required=False, allow_blank=True, default='')
    city = serializers.CharField(required=False, allow_blank=True, default='')
    state = serializers.CharField(required=False, allow_blank=True, default='')
    country = serializers.CharField(required=False, allow_blank=True, default='')

"""
SERIALIZERS DE SALIDA
"""

class MatchSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    image = serializers.CharField(allow_blank=True)
    timestamp = serializers.DateTimeField()


class LocationProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ['latitude', 'longitude', 'address', 'city', 'state', 'country']
