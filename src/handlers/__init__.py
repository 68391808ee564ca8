"""Lambda entrypoints for the booking API."""
