from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

"""
ERRORES DEL MOTOR DE MATCHING
"""

class MatchingError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Matching request failed.'
    default_code = 'matching_error'
    retryable = False


class InvalidInput(MatchingError):
    default_detail = 'Invalid input.'
    default_code = 'invalid_input'


class InvalidDecision(InvalidInput):
    default_detail = 'Decision must be one of: like, pass, superlike.'
    default_code = 'invalid_decision'


class InvalidCoordinates(InvalidInput):
    default_detail = 'Invalid latitude or longitude.'
    default_code = 'invalid_coordinates'


class InvalidFilter(InvalidInput):
    default_detail = 'Invalid search filter.'
    default_code = 'invalid_filter'


class ProfileNotFound(MatchingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Profile not found.'
    default_code = 'not_found'
    message = 'Profile {} not found.'

    def __init__(self, object_id=None):
        super().__init__(self.message.format(object_id) if object_id is not None else None)
        self.object_id = object_id


class PetNotFound(ProfileNotFound):
    default_detail = 'Pet not found.'
    message = 'Pet {} not found.'


class MatchNotFound(ProfileNotFound):
    default_detail = 'Match not found.'
    message = 'No match with profile {}.'


class LocationNotSet(MatchingError):
    """El perfil no tiene ubicación: el cliente debe pedirla al usuario."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'User location not set.'
    default_code = 'location_not_set'


class StoreUnavailable(MatchingError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Profile store is temporarily unavailable. Please retry.'
    default_code = 'store_unavailable'
    retryable = True


def matching_exception_handler(exc, context):
    """
    Formato único de error: {'error': ..., 'code': ...}.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            'error': 'Invalid input.',
            'code': 'invalid_input',
            'fields': exc.detail,
        }
        return response

    if isinstance(exc, APIException):
        codes = exc.get_codes()
        data = {
            'error': str(exc.detail),
            'code': codes if isinstance(codes, str) else exc.default_code,
        }
        if getattr(exc, 'retryable', False):
            data['retryable'] = True
        response.data = data
    return response
