"""URL configuration for uploads app."""

from django.urls import path

from server.apps.uploads import views

app_name = 'uploads'

urlpatterns = [
    path('settings/', views.upload_settings, name='settings'),
    path(
        '<str:upload_type>/remove-subdirectory/',
        views.remove_subdirectory,
        name='remove_subdirectory',
    ),
    path(
        '<str:upload_type>/rename-subdirectory/',
        views.rename_subdirectory,
        name='rename_subdirectory',
    ),
]
