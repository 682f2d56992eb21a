"""Logging setup for hosts embedding the gamification engine"""
import logging

from hapien.config import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure root logging with the standard format"""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, level.upper(), logging.INFO)
    )
