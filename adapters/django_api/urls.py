"""
Roombook Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("reservations", views.reservation_create_view),
    path("reservations/<str:reservation_id>", views.reservation_detail_view),
    path(
        "reservations/<str:reservation_id>/<str:action>",
        views.reservation_action_view,
    ),
    path("bans/<str:user_id>/lift", views.ban_lift_view),
]
