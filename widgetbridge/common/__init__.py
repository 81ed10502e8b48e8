"""Ambient plumbing shared by the bridge: configuration and structured logging."""
