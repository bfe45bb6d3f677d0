"""Bundled data files (Terraform definitions)."""
