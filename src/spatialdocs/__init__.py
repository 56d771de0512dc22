"""Spatial document board."""
