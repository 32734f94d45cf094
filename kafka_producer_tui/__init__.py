"""
Interactive terminal producer for Kafka.
"""

__version__ = "1.0.0"
