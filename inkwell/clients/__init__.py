"""Cache backends and the outbound HTTP client. Import from the specific modules."""
