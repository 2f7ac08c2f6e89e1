"""Common utility helpers shared across the run driver."""

# Import packages
from __future__ import annotations

from pathlib import Path
import logging

from engine.constants import LOG_FILENAME


# Logger Setup
def setup_logger(output_dir, debug=False):
    """initiates logging, sets up logger in the output directory specified

    Parameters
    ----------
    output_dir : path
        output directory path; ``run.log`` is written here
    debug : bool
        log at DEBUG instead of INFO

    Returns
    -------
    Path
        location of the log file
    """
    log_path = Path(output_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # logger level
    if debug:
        loglevel = logging.DEBUG
    else:
        loglevel = logging.INFO

    # logger configs
    logging.basicConfig(
        filename=f'{log_path}/{LOG_FILENAME}',
        encoding='utf-8',
        filemode='w',
        format='%(asctime)s | %(name)s | %(levelname)s :: %(message)s',
        datefmt='%d-%b-%y %H:%M:%S',
        level=loglevel,
        force=True,
    )
    logging.getLogger('pandas').setLevel(logging.WARNING)
    logging.getLogger('matplotlib').setLevel(logging.WARNING)
    return log_path / LOG_FILENAME
