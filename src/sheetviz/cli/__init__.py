"""Command line interface for :mod:`sheetviz`."""
