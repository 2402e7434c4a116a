# File: utils/logger.py

import logging
import os
from pathlib import Path

def setup_logger():
    """Configures and returns the grader's centralized logger."""
    log_dir = Path(os.getenv("GRADER_LOG_DIR", Path(__file__).parent.parent / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "app.log"

    logger = logging.getLogger("java_grader")
    logger.setLevel(logging.INFO)

    # Prevent adding multiple handlers if called more than once
    if not logger.handlers:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_formatter = logging.Formatter('%(levelname)s: %(message)s')
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    return logger

# Default logger instance imported by the other modules
logger = setup_logger()
