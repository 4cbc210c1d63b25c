"""Command-line front end for featherclient."""
