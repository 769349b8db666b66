"""Roster loading from CSV files."""

from .loaders import load_people, load_staff, load_roster, people_from_frame, staff_from_frame

__all__ = ["load_people", "load_staff", "load_roster", "people_from_frame", "staff_from_frame"]
