"""Provision and decommission ROSA clusters."""

__version__ = "0.1.0"
