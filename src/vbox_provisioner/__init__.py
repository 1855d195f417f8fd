"""Provision a VirtualBox VM with an unattended Ubuntu install."""

__version__ = "0.1.0"
