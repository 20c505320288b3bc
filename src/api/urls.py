"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views
from incentives import incentive_views as incentive_api_views
from library import library_views as library_api_views
from api.auth_views import (
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    LogoutAPIView,
)

router = DefaultRouter()
router.register(r'users', v1_views.UserViewSet, basename='user')
router.register(r'accounts', v1_views.AccountViewSet, basename='account')
router.register(r'sales-data', v1_views.SalesDataViewSet, basename='sales-data')
router.register(r'incentive-rules', incentive_api_views.IncentiveRuleViewSet, basename='incentive-rule')
router.register(r'file-categories', library_api_views.CategoryViewSet, basename='file-category')
router.register(r'files', library_api_views.FileViewSet, basename='file')


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),

    # Auth endpoints
    path('auth/token/', CookieTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', LogoutAPIView.as_view(), name='auth-logout'),
    path('auth/me/', v1_views.MeView.as_view(), name='auth-me'),

    # Incentives
    path('incentives/overview/', incentive_api_views.IncentiveOverviewView.as_view(), name='incentives-overview'),
    path('incentives/me/', incentive_api_views.MyIncentiveView.as_view(), name='incentives-me'),
]
