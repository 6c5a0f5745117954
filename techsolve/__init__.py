"""TechSolve: standard, scientific, programmer and date calculator."""

__version__ = "1.0.0"
