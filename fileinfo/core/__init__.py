"""Core configuration, logging and run context."""
