"""HTTP API for the Dispatch Terminal."""
