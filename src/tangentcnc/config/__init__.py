"""Machine and application configuration."""
