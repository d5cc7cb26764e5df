"""Maintenance scripts for the Dispatch Terminal."""
