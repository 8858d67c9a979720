"""Cairn - offline semantic layer for a personal CRM."""

__version__ = "0.1.0"
