# pethoria_backend/urls.py

from django.contrib import admin
from django.urls import path, include

# --- Vistas de Simple JWT ---
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
)

urlpatterns = [
    path('admin/', admin.site.urls),

    # Motor de matching (descubrimiento, swipes, matches, búsqueda)
    path('api/v1/', include('matching.urls')),

    # Obtener y refrescar tokens de acceso
    path('api/v1/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/v1/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
]
