from django.urls import path

from . import views

urlpatterns = [
    path('auth/register/', views.register, name='register'),
    path('auth/login/', views.login_view, name='login'),
    path('auth/logout/', views.logout_view, name='logout'),
    path('profile/', views.profile, name='profile'),

    path('cars/', views.cars, name='cars'),
    path('cars/<uuid:car_id>/', views.car_detail, name='car_detail'),
    path('cars/<uuid:car_id>/mods/', views.car_mods, name='car_mods'),
    path('cars/<uuid:car_id>/mods/<uuid:mod_id>/', views.car_mod_detail, name='car_mod_detail'),

    path('tracks/', views.tracks, name='tracks'),
    path('tracks/<uuid:track_id>/', views.track_detail, name='track_detail'),
    path('tracks/<uuid:track_id>/images/', views.track_images, name='track_images'),
    path('tracks/<uuid:track_id>/reviews/', views.track_reviews, name='track_reviews'),
    path('tracks/<uuid:track_id>/zones/', views.track_zones, name='track_zones'),
    path('tracks/<uuid:track_id>/zones/<uuid:zone_id>/', views.zone_detail, name='zone_detail'),
    path('tracks/<uuid:track_id>/zones/<uuid:zone_id>/tips/', views.zone_tips, name='zone_tips'),

    path('lapbook/', views.lapbook, name='lapbook'),
    path('lapbook/<uuid:record_id>/', views.lap_record_detail, name='lap_record_detail'),

    path('upload/', views.upload, name='upload'),
]
