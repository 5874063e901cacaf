"""Core report building, relay and daemon."""
