"""Infrastructure: logging and configuration helpers."""
