"""Authentication for the OAuth relay."""
