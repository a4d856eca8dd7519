"""HTTP API of the AZ reporting service."""
