# -*- coding: utf-8

"""Module for logging specification.

All modules log through the package logger :code:`TurboMapLogger`. Besides
the standard severities two custom levels exist: PROGRESS for the progress
of a speed sweep and RESULT for the summary of a finished calculation.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/tools/logger.py

SPDX-License-Identifier: MIT
"""

import logging
import os
import sys
from logging import handlers

import turbomap

TURBOMAP_LOGGER_ID = "TurboMapLogger"
TURBOMAP_PROGRESS_LOG_LEVEL = logging.INFO + 1  # 21
TURBOMAP_RESULT_LOG_LEVEL = logging.INFO + 2  # 22

logging.addLevelName(TURBOMAP_PROGRESS_LOG_LEVEL, 'PROGRESS')
logging.addLevelName(TURBOMAP_RESULT_LOG_LEVEL, 'RESULT')

logging.captureWarnings(True)
logger = logging.getLogger(TURBOMAP_LOGGER_ID)
logger.setLevel(logging.DEBUG)


def get_logger():
    return logger


def _stacklevel(kwargs):
    """Return the stacklevel pointing past the wrappers of this module."""
    return kwargs.get("stacklevel", 1) + 1


def log(level, msg, *args, **kwargs):
    """
    Log 'msg % args' with the integer severity 'level'.

    log(logging.WARNING, "No root at shaft speed %s.", 0.6)
    """
    kwargs["stacklevel"] = _stacklevel(kwargs)
    get_logger().log(level, msg, *args, **kwargs)


def debug(msg, *args, **kwargs):
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(logging.DEBUG, msg, *args, **kwargs)


def info(msg, *args, **kwargs):
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(logging.INFO, msg, *args, **kwargs)


def warning(msg, *args, **kwargs):
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(logging.WARNING, msg, *args, **kwargs)


def error(msg, *args, **kwargs):
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(logging.ERROR, msg, *args, **kwargs)


def exception(msg, *args, exc_info=True, **kwargs):
    """Log an ERROR with exception information."""
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)


def critical(msg, *args, **kwargs):
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(logging.CRITICAL, msg, *args, **kwargs)


def progress(value, msg, *args, **kwargs):
    """
    Log 'msg % args' with severity 'PROGRESS' and a progress value.

    The value (0 to 100 by default) is attached to the record as
    :code:`progress_val`, the limits as :code:`progress_min` and
    :code:`progress_max`. Pass :code:`extra` to change the limits.

    progress(40, "Sweep point %d of %d.", 4, 10)
    """
    extra = kwargs.setdefault("extra", {})
    extra.setdefault("progress_min", 0)
    extra.setdefault("progress_max", 100)
    extra["progress_val"] = value
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(TURBOMAP_PROGRESS_LOG_LEVEL, msg, *args, **kwargs)


def result(msg, *args, **kwargs):
    """Log 'msg % args' with severity 'RESULT'."""
    kwargs["stacklevel"] = _stacklevel(kwargs)
    log(TURBOMAP_RESULT_LOG_LEVEL, msg, *args, **kwargs)


def add_console_logging(
        logformat=None, logdatefmt="%H:%M:%S", loglevel=logging.INFO,
        log_the_version=True):
    r"""
    Attach a stdout handler to the package logger.

    Parameters
    ----------
    logformat : str
        Format of the screen output.
        Default: "%(asctime)s-%(levelname)s-%(message)s"

    logdatefmt : str
        Format of the time stamp. Default: "%H:%M:%S"

    loglevel : int
        Level of the screen output. Default: 20 (logging.INFO)

    log_the_version : boolean
        Log the TurboMap version after attaching the handler.

    Returns
    -------
    handler : logging.StreamHandler
        The attached handler.
    """
    if logformat is None:
        logformat = "%(asctime)s-%(levelname)s-%(message)s"

    loghandler = logging.StreamHandler(sys.stdout)
    loghandler.setFormatter(logging.Formatter(logformat, logdatefmt))
    loghandler.setLevel(loglevel)
    get_logger().addHandler(loghandler)

    if log_the_version:
        info("Used TurboMap version: %s", get_version())
    return loghandler


def add_file_logging(
        logpath=None, logfile=None, logrotation=None, logformat=None,
        logdatefmt=None, loglevel=logging.DEBUG, log_the_version=True,
        log_the_path=True):
    r"""
    Attach a daily rotating file handler to the package logger.

    Parameters
    ----------
    logpath : str
        Directory of the log files. Default: '~/.turbomap/log_files'.

    logfile : str
        Name of the log file. Default: 'turbomap.log'.

    logrotation : dict
        Keyword arguments updating the defaults
        :code:`{'when': 'midnight', 'backupCount': 10}` of the
        :code:`TimedRotatingFileHandler`.

    logformat : str
        Format of the file output.
        Default: "%(asctime)s - %(levelname)s - %(module)s - %(message)s"

    logdatefmt : str
        Format of the time stamp.

    loglevel : int
        Level of the file output. Default: 10 (logging.DEBUG)

    log_the_version : boolean
        Log the TurboMap version after attaching the handler.

    log_the_path : boolean
        Log the path of the log file after attaching the handler.

    Returns
    -------
    file : str
        Path of the log file.
    """
    if logpath is None:
        logpath = turbomap.tools.helpers.extend_basic_path('log_files')
    os.makedirs(logpath, exist_ok=True)
    logfile = os.path.join(logpath, logfile or 'turbomap.log')

    rotation = {'when': 'midnight', 'backupCount': 10}
    rotation.update(logrotation or {})
    if logformat is None:
        logformat = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"

    loghandler = handlers.TimedRotatingFileHandler(logfile, **rotation)
    loghandler.setFormatter(logging.Formatter(logformat, logdatefmt))
    loghandler.setLevel(loglevel)
    get_logger().addHandler(loghandler)

    if log_the_path:
        info("Path for logging: %s", logfile)
    if log_the_version:
        info("Used TurboMap version: %s", get_version())
    return logfile


def define_logging(
        logpath=None, logfile='turbomap.log', file_format=None,
        screen_format=None, file_datefmt=None, screen_datefmt=None,
        screen_level=logging.INFO, file_level=logging.DEBUG,
        log_the_version=True, log_the_path=True, timed_rotating=None):
    r"""
    Set up screen and file logging in one call.

    By default the INFO level is printed on the screen and the DEBUG level
    is written to the file.

    Returns
    -------
    file : str
        Path of the log file.

    Example
    -------
    >>> import logging, tempfile
    >>> from turbomap.tools import logger
    >>> path = logger.define_logging(
    ...     logpath=tempfile.mkdtemp(), screen_level=logging.ERROR,
    ...     timed_rotating={'backupCount': 4}
    ... )
    >>> path[-12:]
    'turbomap.log'
    """
    add_console_logging(screen_format, screen_datefmt, screen_level, False)
    return add_file_logging(
        logpath, logfile, timed_rotating, file_format, file_datefmt,
        file_level, log_the_version, log_the_path
    )


def get_version():
    """Return the version string of the installed TurboMap package."""
    return getattr(turbomap, '__version__', 'unknown')
