"""Hostel front desk: room occupancy, guest history and exports."""

__version__ = "0.1.0"
