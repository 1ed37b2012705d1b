from .config import (
    Config,

    global_config
)

from .log import (
    JsonEncoder,
    JsonFormatter,

    init_log_console,
    init_log_file,

    init_log
)

from .req_ctx import (
    get_req_ctx,
    query_ctx,
    set_req_ctx
)
