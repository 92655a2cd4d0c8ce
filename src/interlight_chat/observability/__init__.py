"""Logging estruturado, correlation id e medição de latência."""
