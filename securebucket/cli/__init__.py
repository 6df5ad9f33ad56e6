"""Securebucket CLI — Typer-based command-line interface.

Provides the ``securebucket`` command with subcommands for synthesizing
the resource graph and previewing derived names.  Output uses Rich.
"""
