"""Utilities package for the Pack Planner application."""
