"""Disk footprint reporting for files and directory trees."""
