"""Configuration and display helpers."""
