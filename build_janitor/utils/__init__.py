"""Utility modules for path safety, logging and async bridging."""
