"""liftbook: fitness-tracking backend for training programs."""

__version__ = "0.1.0"
