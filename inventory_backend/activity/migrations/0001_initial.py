"""
======================================================
PATH: activity/migrations/0001_initial.py
======================================================
MIGRATION: CREATE ActivityLog (APPEND-ONLY AUDIT TRAIL)
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "activity",
                    models.CharField(
                        max_length=10,
                        choices=[
                            ("CREATE", "Create"),
                            ("MODIFY", "Modify"),
                            ("DELETE", "Delete"),
                        ],
                    ),
                ),
                ("description", models.TextField()),
                ("actor", models.CharField(max_length=150)),
                ("timestamp", models.DateTimeField(db_index=True)),
            ],
            options={
                "ordering": ["-timestamp", "-id"],
            },
        ),
        migrations.AddIndex(
            model_name="activitylog",
            index=models.Index(
                fields=["activity", "timestamp"], name="activity_kind_ts_idx"
            ),
        ),
        migrations.AddIndex(
            model_name="activitylog",
            index=models.Index(
                fields=["actor", "timestamp"], name="activity_actor_ts_idx"
            ),
        ),
    ]
