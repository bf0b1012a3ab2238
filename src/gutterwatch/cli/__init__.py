"""gutterwatch command line interface."""
