"""Main URL mapping configuration file."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('upload/', include('server.apps.uploads.urls')),
    path('admin/', admin.site.urls),
]
