"""API subpackage - HTTP surface for the register."""
