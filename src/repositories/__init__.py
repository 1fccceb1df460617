"""Storage adapters for queue snapshots and durable ticket numbering."""
