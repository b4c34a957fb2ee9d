from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Room",
            fields=[
                ("room_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name", models.CharField(blank=True, default="", max_length=255)),
                ("requires_approval", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "roombook_rooms",
                "ordering": ["room_id"],
            },
        ),
        migrations.CreateModel(
            name="BanRecord",
            fields=[
                ("user_id", models.CharField(max_length=255, primary_key=True, serialize=False)),
                ("no_show_count", models.PositiveIntegerField(default=0)),
                ("late_count", models.PositiveIntegerField(default=0)),
                ("temporary_ban_count", models.PositiveIntegerField(default=0)),
                ("ban_until", models.DateTimeField(blank=True, null=True)),
                ("permanent_ban", models.BooleanField(default=False)),
                ("last_no_show_at", models.DateTimeField(blank=True, null=True)),
                ("version", models.PositiveIntegerField(default=1)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "roombook_ban_records",
                "ordering": ["user_id"],
            },
        ),
        migrations.CreateModel(
            name="Reservation",
            fields=[
                ("reservation_id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("user_id", models.CharField(max_length=255)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("attendees", models.PositiveIntegerField(default=0)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("finished", "Finished"),
                            ("cancelled", "Cancelled"),
                        ],
                        max_length=16,
                    ),
                ),
                ("check_in_at", models.DateTimeField(blank=True, null=True)),
                ("is_late", models.BooleanField(default=False)),
                ("is_no_show", models.BooleanField(default=False)),
                ("no_show_report_count", models.PositiveIntegerField(default=0)),
                ("no_show_reported_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("version", models.PositiveIntegerField(default=1)),
                (
                    "room",
                    models.ForeignKey(
                        db_column="room_id",
                        on_delete=models.deletion.PROTECT,
                        related_name="reservations",
                        to="core_reservation_store.room",
                    ),
                ),
            ],
            options={
                "db_table": "roombook_reservations",
                "ordering": ["start_time", "reservation_id"],
                "indexes": [
                    models.Index(fields=["room", "start_time"], name="idx_resv_room_start"),
                    models.Index(fields=["status", "start_time"], name="idx_resv_status_start"),
                    models.Index(fields=["user_id"], name="idx_resv_user"),
                ],
            },
        ),
    ]
