from django.urls import path
from .views import RoleListView

app_name = "registry"

urlpatterns = [
    path("", RoleListView.as_view(), name="roles"),
]
