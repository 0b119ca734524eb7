"""External service adapters used by the reconciler."""
