# File: tests/__init__.py
"""Test package for the Parking Lot System."""
