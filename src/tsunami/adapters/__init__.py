"""Adapters connecting the domain ports to relays, files and logging."""
