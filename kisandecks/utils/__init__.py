"""Input sanitization and media storage helpers"""
