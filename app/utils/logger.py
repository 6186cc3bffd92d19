import logging

from app.config import get_settings


def setup_logger(name: str = "app") -> logging.Logger:
    """Configure the application logger once and return it"""
    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    
    logger = logging.getLogger(name)
    logger.setLevel(level)
    
    # Avoid duplicate handlers on reload
    if logger.handlers:
        return logger
    
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(console_handler)
    
    return logger
