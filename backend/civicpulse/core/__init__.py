"""Configuration, security, errors and request dependencies."""
