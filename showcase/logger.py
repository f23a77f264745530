# showcase/logger.py

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
import json
import threading
from datetime import datetime, timezone


# JSON formatter, one object per line
class JsonFormatter(logging.Formatter):
  def format(self, record):
    log_record = {
      "timestamp": datetime.now(timezone.utc).isoformat(),
      "level": record.levelname,
      "logger": record.name,
      "message": record.getMessage(),
      "thread": record.threadName,
      "file": record.pathname,
      "line": record.lineno,
      "function": record.funcName
    }

    if record.exc_info:
      log_record["exception"] = self.formatException(record.exc_info)

    return json.dumps(log_record)


json_formatter = JsonFormatter()

_configure_lock = threading.Lock()


def configure_logging():
  """
  Configure the root logger for the showcase services.

  - stdout only carries ERROR records
  - 'testing' writes everything to logs/test.log
  - 'development' and 'production' write INFO and up to logs/app.log
  """
  env = os.getenv("APP_ENV", "development")
  log_dir = os.getenv("LOG_DIR", "logs")
  app_log_file = os.path.join(log_dir, "app.log")
  test_log_file = os.path.join(log_dir, "test.log")

  os.makedirs(log_dir, exist_ok=True)

  with _configure_lock:
    logger = logging.getLogger()
    if env in ("testing", "development"):
      logger.setLevel(logging.DEBUG)
    else:
      logger.setLevel(logging.INFO)

    # Clear previous handlers (streamlit reruns the script on every interaction)
    for handler in list(logger.handlers):
      if getattr(handler, "_showcase", False):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(json_formatter)
    console_handler.setLevel(logging.ERROR)
    console_handler._showcase = True
    logger.addHandler(console_handler)

    if env == "testing":
      file_handler = RotatingFileHandler(test_log_file, maxBytes=1*1024*1024, backupCount=1, encoding="utf-8")
      file_handler.setLevel(logging.DEBUG)
    else:
      file_handler = RotatingFileHandler(app_log_file, maxBytes=5*1024*1024, backupCount=3, encoding="utf-8")
      file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(json_formatter)
    file_handler._showcase = True
    logger.addHandler(file_handler)


def get_logger(name):
  """
  Returns a logger object with specific name.
  configure_logging() should be called once by the entry point before use.
  """
  return logging.getLogger(name)
