"""simple-vault API server."""
