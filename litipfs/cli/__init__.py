"""Command-line interface for lit-ipfs."""
