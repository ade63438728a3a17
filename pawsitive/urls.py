from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/roles/", include("registry.urls")),
    path("api/applications/", include("adoptions.urls")),
    path("api/donations/", include("donations.urls")),
]
