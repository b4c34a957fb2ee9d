"""
Roombook Reservation Store - Relational Reservation State
=========================================================
Rows behind DjangoReservationStore. `version` on Reservation and
BanRecord is the compare-and-swap token; every write is a conditional
UPDATE on it.
"""

from __future__ import annotations

from django.db import models


class ReservationStatusChoice(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    FINISHED = "finished", "Finished"
    CANCELLED = "cancelled", "Cancelled"


class Room(models.Model):
    room_id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=255, default="", blank=True)
    requires_approval = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "roombook_rooms"
        ordering = ["room_id"]

    def __str__(self) -> str:
        return f"{self.room_id} ({self.name})"


class Reservation(models.Model):
    reservation_id = models.CharField(primary_key=True, max_length=64)
    room = models.ForeignKey(
        Room,
        on_delete=models.PROTECT,
        related_name="reservations",
        db_column="room_id",
    )
    user_id = models.CharField(max_length=255)
    title = models.CharField(max_length=255)
    description = models.TextField(default="", blank=True)
    attendees = models.PositiveIntegerField(default=0)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(max_length=16, choices=ReservationStatusChoice.choices)
    check_in_at = models.DateTimeField(null=True, blank=True)
    is_late = models.BooleanField(default=False)
    is_no_show = models.BooleanField(default=False)
    no_show_report_count = models.PositiveIntegerField(default=0)
    no_show_reported_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    version = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "roombook_reservations"
        ordering = ["start_time", "reservation_id"]
        indexes = [
            models.Index(fields=["room", "start_time"], name="idx_resv_room_start"),
            models.Index(fields=["status", "start_time"], name="idx_resv_status_start"),
            models.Index(fields=["user_id"], name="idx_resv_user"),
        ]

    def __str__(self) -> str:
        return f"{self.reservation_id} ({self.status})"


class BanRecord(models.Model):
    user_id = models.CharField(primary_key=True, max_length=255)
    no_show_count = models.PositiveIntegerField(default=0)
    late_count = models.PositiveIntegerField(default=0)
    temporary_ban_count = models.PositiveIntegerField(default=0)
    ban_until = models.DateTimeField(null=True, blank=True)
    permanent_ban = models.BooleanField(default=False)
    last_no_show_at = models.DateTimeField(null=True, blank=True)
    version = models.PositiveIntegerField(default=1)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "roombook_ban_records"
        ordering = ["user_id"]

    def __str__(self) -> str:
        return f"{self.user_id} (no-shows={self.no_show_count})"
