from django.urls import path
from .views import DonationListView, DonationDetailView, UserDonationsView, DonationHistoryView, DonationReceiptView

app_name = "donations"

urlpatterns = [
    path("", DonationListView.as_view(), name="list"),
    path("<int:pk>/", DonationDetailView.as_view(), name="detail"),
    path("<int:pk>/history/", DonationHistoryView.as_view(), name="history"),
    path("<int:pk>/receipt/", DonationReceiptView.as_view(), name="receipt"),
    path("user/<int:user_id>/", UserDonationsView.as_view(), name="by-user"),
]
