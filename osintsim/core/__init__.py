"""Result synthesis, target validation and the scan flow."""
