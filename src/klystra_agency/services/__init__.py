"""Domain services: authentication, sessions, upload storage and media helpers."""
