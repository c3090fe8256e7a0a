# resume/utils.py
import logging
from pathlib import Path
from datetime import datetime


def setup_logging(log_dir: Path, log_level: str = "INFO"):
    """Configure logging for the service"""
    log_dir.mkdir(parents=True, exist_ok=True)

    # Create log filename with timestamp
    log_file = log_dir / f"resume_tailor_{datetime.now().strftime('%Y%m%d')}.log"

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
