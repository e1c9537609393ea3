"""Permit marker overlay."""

from .markers import Marker, MarkerController, marker_key, project_entities

__all__ = ["Marker", "MarkerController", "marker_key", "project_entities"]
