"""Operator surface: the Django admin, with the maintenance actions on accounts and submissions."""

from django.contrib import admin
from django.urls import path

urlpatterns = [
    path("admin/", admin.site.urls),
]
