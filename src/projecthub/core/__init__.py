"""Core logic for project-hub, independent of any terminal or CLI surface."""
