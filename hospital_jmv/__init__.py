"""Django project package for the Hospital JMV records backend."""
