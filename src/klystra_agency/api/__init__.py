"""HTTP API for the agency website."""
