"""Reminder scheduling."""
