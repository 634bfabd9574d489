"""Infrastructure layer - settings, engines and logging."""
