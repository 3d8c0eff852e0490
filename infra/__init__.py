"""Adapters implementing the studio collaborator contracts."""
