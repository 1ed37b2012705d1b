from .config import (
    Config,

    global_config
)

from .encrypt import (
    AbstractEncrypter,
    FernetEncrypter
)

from .log import LogConfig
from .query import QueryConfig
