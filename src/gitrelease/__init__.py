"""
gitrelease
==========
"""

import logging

from .gitrelease import latest

__all__ = ["latest"]


# When used as a library, we default to opt-in approach, whereas library user
# has to enable logging
logging.getLogger(__name__).addHandler(logging.NullHandler())
