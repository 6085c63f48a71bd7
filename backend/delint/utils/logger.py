"""
Logging configuration
"""
import logging
import sys

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

logger = logging.getLogger("delint")

def setup_logging(debug: bool = False):
    """Configure application logging"""
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
