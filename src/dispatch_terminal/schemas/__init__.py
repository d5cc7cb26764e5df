# src/dispatch_terminal/schemas/__init__.py
"""Pydantic schemas for the Dispatch Terminal API."""
