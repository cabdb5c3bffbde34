"""CampusShare messaging and notification service."""
