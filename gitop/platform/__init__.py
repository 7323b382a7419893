"""Platform abstraction layer: processes, cancellation, user paths."""

from .cancel import CancelToken
from .paths import (
    default_config_path,
    home,
    user_config_dir,
)
from .process import (
    ProcessError,
    run,
    stream,
)

__all__ = [
    # cancel
    "CancelToken",
    # paths
    "default_config_path",
    "home",
    "user_config_dir",
    # process
    "ProcessError",
    "run",
    "stream",
]
