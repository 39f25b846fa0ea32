"""Infrastructure adapters: development stubs and observability."""
