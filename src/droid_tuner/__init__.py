"""droid-tuner: reassign the models of Factory droids from the terminal."""

import logging

__version__ = "0.4.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
