"""Booking core for the Quicker Checker staff check-in proxy."""
