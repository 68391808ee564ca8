"""Data access for bookings."""
