"""Runtime orchestration: event loop, background loading, config, terminal."""
