"""Runtime components: retry engine, cancellation and logging setup."""
