"""Watchdeck modules."""
