"""Core wiring: settings and exception-to-response mapping."""
