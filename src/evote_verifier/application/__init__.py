"""Application layer - payload models, ports, services, verifications."""
