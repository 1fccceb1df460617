"""Runtime configuration for the queue service."""
