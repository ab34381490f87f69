"""Subcommands registered on the ``mvnkeeper`` CLI group."""
