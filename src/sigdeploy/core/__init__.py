"""Configuration, errors, protocols and logging shared by all components."""
