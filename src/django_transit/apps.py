"""Django app configuration for django-transit."""

from django.apps import AppConfig


class DjangoTransitConfig(AppConfig):
    """App configuration for django-transit."""

    name = "django_transit"
    verbose_name = "Transit Reservations"
    default_auto_field = "django.db.models.BigAutoField"
