"""Foundation: error types and environment configuration."""
