from django.urls import path
from .views import ApplicationListView, ApplicationDetailView, ApplicantApplicationsView, PetApplicationsView

app_name = "adoptions"

urlpatterns = [
    path("", ApplicationListView.as_view(), name="list"),
    path("<int:pk>/", ApplicationDetailView.as_view(), name="detail"),
    path("user/<int:user_id>/", ApplicantApplicationsView.as_view(), name="by-applicant"),
    path("pet/<int:pet_id>/", PetApplicationsView.as_view(), name="by-pet"),
]
