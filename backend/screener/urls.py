from django.urls import path

from screener import views

urlpatterns = [
    path('screen', views.ScreenAPIView.as_view(), name='screen-api'),
    path('health', views.HealthAPIView.as_view(), name='health-api'),
]
