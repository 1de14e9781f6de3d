"""GameDay readiness scoring and coaching service."""
