"""Offering catalog administration API."""
