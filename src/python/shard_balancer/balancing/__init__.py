"""Balancing and assignment strategies."""
