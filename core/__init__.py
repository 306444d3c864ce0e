"""Core package for lead codecs, validators and error types."""
