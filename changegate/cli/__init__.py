"""changegate CLI — Typer-based command-line interface.

Provides the ``changegate`` command with subcommands for deciding whether
a build changed since the last release, fingerprinting an output
directory, and resolving reference and next release tags.

All output uses Rich for formatted terminal display.
"""
