"""Report export helpers (text, JSON, CSV, PDF, PNG)."""
