"""Configuration: settings, logging and verification constants."""
