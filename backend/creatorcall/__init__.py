"""Creator booking marketplace backend."""
