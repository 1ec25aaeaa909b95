"""Configuration, logging and errors shared by the runner."""
