"""Application layer: configuration, session controller and HTTP API."""
