"""
Runtime defaults for the famtree server, read from the environment.
Command line flags override these.
"""

import os

DATA_FILE = os.getenv("FAMTREE_DATA_FILE") or None  # unset means keep the tree in memory
ROOT_NAME = os.getenv("FAMTREE_ROOT_NAME", "ROOT")
STRICT_LOAD = os.getenv("FAMTREE_STRICT_LOAD", "true").lower() == "true"
LOG_LEVEL = os.getenv("FAMTREE_LOG_LEVEL", "INFO").upper()
