"""Textual screens and panels for the dashboard."""
