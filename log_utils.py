import logging
import time
import functools
import json
import os
from datetime import datetime

from pydantic import BaseModel

from config import LOG_DIR, LOG_LEVEL, LOG_TO_FILE

# Create a logger
logger = logging.getLogger('api_calls')
logger.setLevel(getattr(logging, LOG_LEVEL.upper(), logging.INFO))

# Create formatters and add it to handlers
log_format = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_format)
    logger.addHandler(console_handler)

    if LOG_TO_FILE:
        os.makedirs(LOG_DIR, exist_ok=True)
        current_time = datetime.now().strftime('%Y%m%d_%H%M%S')
        file_handler = logging.FileHandler(os.path.join(LOG_DIR, f'api_calls_{current_time}.log'))
        file_handler.setFormatter(log_format)
        logger.addHandler(file_handler)


def preview(value, limit=500):
    """Render a result as a short JSON string for the log."""
    if isinstance(value, BaseModel):
        text = value.model_dump_json(by_alias=True)
    elif isinstance(value, list):
        text = json.dumps([
            item.model_dump(by_alias=True) if isinstance(item, BaseModel) else item
            for item in value
        ])
    elif isinstance(value, dict):
        text = json.dumps(value, default=str)
    else:
        text = str(value)
    return text if len(text) <= limit else text[:limit] + "..."


def log_api_call(func):
    """Decorator to log API calls with timing and results."""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.time()
        function_name = func.__name__

        # Log function call
        logger.info(f"Starting {function_name}")
        logger.debug(f"Arguments: {args}")
        logger.debug(f"Keyword Arguments: {kwargs}")

        try:
            result = await func(*args, **kwargs)
            execution_time = time.time() - start_time

            logger.info(f"Completed {function_name} in {execution_time:.2f} seconds")
            logger.info(f"Result: {preview(result)}")
            return result

        except Exception as e:
            execution_time = time.time() - start_time
            logger.error(f"Error in {function_name} after {execution_time:.2f} seconds")
            logger.error(f"Error details: {str(e)}")
            raise

    return wrapper
