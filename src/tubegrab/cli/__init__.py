"""CLI layer — argument parsing, user interaction, and error boundary.

This package is the outermost layer of the application and plays the
part of the presentation layer: it renders analysis results, lets the
user pick an output mode, and mirrors job status, progress and log lines
on the terminal.  It may import from ``core``, ``infra``, ``utils`` and
``config``, but no other layer may import from ``cli``.
"""
