"""Factories de construção do pipeline."""
