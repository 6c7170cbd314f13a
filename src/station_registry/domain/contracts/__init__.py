"""Contracts for lifetime-scoped services shared across requests."""
