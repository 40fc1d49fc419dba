"""Migrations match the models."""

from io import StringIO

import pytest
from django.core.management import call_command
from django.db import connection


@pytest.mark.django_db
class TestMigrations:

    def test_no_model_changes_without_migration(self):
        out = StringIO()
        # --check exits non-zero when a migration would be written
        call_command(
            "makemigrations", "django_transit", "--check", "--dry-run", stdout=out
        )
        assert "No changes detected" in out.getvalue()

    def test_constraints_exist_in_database(self):
        with connection.cursor() as cursor:
            trip_constraints = connection.introspection.get_constraints(
                cursor, "django_transit_trip"
            )
            booking_constraints = connection.introspection.get_constraints(
                cursor, "django_transit_booking"
            )

        assert "transit_trip_departure_idx" in trip_constraints
        assert "transit_booking_one_active_per_seat" in booking_constraints
        assert "transit_bkg_trip_status_idx" in booking_constraints
