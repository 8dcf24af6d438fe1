"""Webhook callback services."""
