"""
Simple utilities used by the labs.
"""
from .logging import get_logger
