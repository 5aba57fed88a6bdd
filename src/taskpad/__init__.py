"""taskpad: local personal task manager with a simple account layer."""
