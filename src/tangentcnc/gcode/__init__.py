"""G-code writing, reading, and validation."""
