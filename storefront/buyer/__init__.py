"""Buyer storefront client: state stores and backend boundary."""
