"""Bounded contexts of the build pipeline."""
