"""Warehouse service: quantity projection of the shop catalog."""
