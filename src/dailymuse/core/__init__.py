"""Core building blocks: configuration, exceptions, logging, blob storage."""
