"""Small helpers shared by infrastructure and application code."""

from realestate.shared.utils.generators import generate_cuid

__all__ = ["generate_cuid"]
