"""Utility modules for WiFi Signal Plus."""
