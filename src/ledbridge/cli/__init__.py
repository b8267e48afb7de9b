"""Command line interface for ledbridge."""
