"""Infrastructure: configuration, logging and data file access."""
