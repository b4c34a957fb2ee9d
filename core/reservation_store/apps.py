"""
Roombook Reservation Store - App Configuration
==============================================
Persistent rooms, reservations and per-user ban records.
"""

from django.apps import AppConfig


class CoreReservationStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.reservation_store"
    label = "core_reservation_store"
    verbose_name = "Roombook Reservation Store"
