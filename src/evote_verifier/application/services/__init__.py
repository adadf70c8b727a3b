"""Application services: hashing conversions, metadata, run strategies, runner."""
