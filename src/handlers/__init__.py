"""Lambda handlers for the queue HTTP API."""
