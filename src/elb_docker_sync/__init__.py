"""Keeps an ELBv2 target group in sync with the versioned Docker containers on this host."""
