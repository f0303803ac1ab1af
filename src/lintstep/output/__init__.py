"""Presentation — Rich terminal UI and JSON report."""
