"""Infrastructure adapters: HTTP, source readers and document stores."""
