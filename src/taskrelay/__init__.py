"""Monday.com to Slack task report relay and local to-do manager."""

__version__ = "0.1.0"
