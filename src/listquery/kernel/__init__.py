"""Kernel – error hierarchy shared by every listquery layer."""
