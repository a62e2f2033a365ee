"""HTTP API for the OAuth relay."""
