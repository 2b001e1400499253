"""Quickal: Google Calendar manager with a natural-language scheduling assistant."""
