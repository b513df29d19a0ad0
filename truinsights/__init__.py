"""TruInsights: voice journaling for fitness-class attendees."""

__version__ = "0.1.0"
