"""
stagepath.constants
===================

Single place for default names and separators. Config, staging and allocator
code import from here so we never duplicate strings like ".staging".
"""

from __future__ import annotations

# ---- staging layout -----------------------------------------------------------

DEFAULT_STAGING_DIR = ".staging"

# <staging_root><EXECUTION_SEP><execution id><UNIT_SEP><unit id>
EXECUTION_SEP = "_"
UNIT_SEP = "-"

# ---- temp leaf names ----------------------------------------------------------

DEFAULT_EXT_PREFIX = "_tmp.ext."

# First issued id is DEFAULT_ID_SEED + 1; kept clear of small ids used elsewhere.
DEFAULT_ID_SEED = 10000

# ---- filesystems --------------------------------------------------------------

# Federated mounts: renames across the underlying namespaces fail.
RENAME_UNSAFE_SCHEMES: tuple[str, ...] = ("viewfs",)

LOCAL_SCHEME = "file"
MEMORY_SCHEME = "mem"

# ---- execution ids ------------------------------------------------------------

EXECUTION_ID_PREFIX = "stagepath"
