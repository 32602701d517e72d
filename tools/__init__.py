"""Command-line tools for running accretion simulations."""
