# main.py
import logging
import os

from UI.utils import load_picker_options
from UI.main_window import start_app
from logging_config import level_from_name, setup_logging

if __name__ == "__main__":
    level = level_from_name(os.environ.get("DATEPICKER_LOG_LEVEL", "INFO"))
    setup_logging(level=level, debug_mode=level == logging.DEBUG)
    start_app(options=load_picker_options())
