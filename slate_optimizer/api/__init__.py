"""HTTP API for the slate optimizer."""
