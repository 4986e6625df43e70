"""Bundled event pools."""
