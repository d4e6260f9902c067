"""rsyncfilter Core - Shared constants, errors and validators.

Import specific names from submodules:
    from rsyncfilter.core.constants import ErrorCode, Limits
    from rsyncfilter.core.validators import PatternSyntaxError
"""

from rsyncfilter.core import constants, validators

__all__ = [
    "constants",
    "validators",
]
