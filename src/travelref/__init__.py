"""Reference-data reconciliation pipeline for travel datasets."""
