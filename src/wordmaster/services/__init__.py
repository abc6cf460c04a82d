"""Mastery scheduling and persistence services."""
