from django.urls import path
from . import views

urlpatterns = [
    path('sync/', views.sync_district, name='sync_district'),
    path('district/', views.district_performance, name='district_performance'),
]
