"""
Portfolio admin: model galleries with ordered, featured-image aware collections.
"""
__version__ = "0.1.0"
