"""Adapters connecting the core to logging, channels and web frameworks."""
