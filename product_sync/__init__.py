"""Shared building blocks for the shop and warehouse services."""
