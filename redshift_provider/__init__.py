"""Redshift database resource provider."""
