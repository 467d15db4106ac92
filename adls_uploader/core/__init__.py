"""Core building blocks of adls_uploader."""
