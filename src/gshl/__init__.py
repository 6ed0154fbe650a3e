"""Ratings and lineup optimization for the GSHL fantasy hockey league."""
