"""Infrastructure adapters: storage backends and host environment."""
