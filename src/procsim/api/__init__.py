"""Stateless HTTP wrapper around the simulation engine."""
