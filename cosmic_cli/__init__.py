"""Command line interface for Cosmic."""
