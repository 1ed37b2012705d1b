import base64, datetime, enum, json, logging, os

from .config import FernetEncrypter
from .req_ctx import get_req_ctx

#-----------------------------------------------------------------------------

_fernet_encryptor = None

# Request context keys copied onto every record when present.
_CTX_FIELDS = ("query_id", "operation", "sample_type")

#-----------------------------------------------------------------------------

class JsonEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, datetime.datetime):
            return o.isoformat()

        if isinstance(o, enum.Enum):
            return o.value

        if isinstance(o, bytes):
            return base64.urlsafe_b64encode(o).decode()

        if isinstance(o, set | frozenset):
            return sorted(o, key=str)

        if hasattr(o, "model_dump"):
            return o.model_dump(mode="json", by_alias=True)

        return super().default(o)

#-----------------------------------------------------------------------------

class JsonFormatter(logging.Formatter):
    def __init__(self, extra: dict | None = None):
        super().__init__()

        self._extra = extra

        self._predefined_fields = {
            "name",
            "msg",
            "args",
            "levelname",
            "levelno",
            "pathname",
            "filename",
            "module",
            "exc_info",
            "exc_text",
            "stack_info",
            "lineno",
            "funcName",
            "created",
            "msecs",
            "relativeCreated",
            "thread",
            "threadName",
            "processName",
            "process",
            "taskName",
            # Additional field.
            "encrypted_info",
            "exception"
        }

    #-----------------------------------------------------

    def format(self, record: logging.LogRecord):
        json_record = {
            "time"  : self.formatTime(record, self.datefmt),
            "level" : getattr(record, "levelname", "INFO"),
            "msg"   : record.getMessage()
        }

        #-------------------------------------------------
        # Exception information.

        if record.exc_info:
            json_record["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            json_record["stack_info"] = record.stack_info

        #-------------------------------------------------

        function = getattr(record, "funcName", None)
        if function and function != "<module>":
            json_record["function"] = function

        if hasattr(record, "pathname") and hasattr(record, "lineno"):
            filename = getattr(record, "pathname").removeprefix(os.getcwd()).removeprefix(os.sep)
            json_record["file"] = f"{filename}:{getattr(record, 'lineno')}"

        if getattr(record, "module", None):
            json_record["module"] = record.module

        #-------------------------------------------------
        # Health values never reach the log in plain text when a key is set.

        encrypted_info = getattr(record, "encrypted_info", "")
        if encrypted_info:
            plain_encrypted_info = json.dumps(
                encrypted_info,
                ensure_ascii=False,
                separators=(',', ':'),
                cls=JsonEncoder
            )

            if _fernet_encryptor and _fernet_encryptor.enabled:
                encrypted_encrypted_info = _fernet_encryptor.encrypt(plain_encrypted_info)
            else:
                encrypted_encrypted_info = plain_encrypted_info

            json_record["encrypted_info"] = encrypted_encrypted_info \
                if len(encrypted_encrypted_info) <= 200 \
                else f"{encrypted_encrypted_info[:100]}**********{encrypted_encrypted_info[-100:]}"

        #-------------------------------------------------
        # Other fields.

        for k in record.__dict__:
            if k not in self._predefined_fields:
                json_record[k] = record.__dict__[k]

        if self._extra:
            json_record.update(self._extra)

        for field in _CTX_FIELDS:
            if field not in json_record:
                value = get_req_ctx(field)
                if value:
                    json_record[field] = value

        return json.dumps(json_record, ensure_ascii=False, separators=(",", ":"), cls=JsonEncoder)

#-----------------------------------------------------------------------------

def _set_secret_key(secret_key: str):
    global _fernet_encryptor
    _fernet_encryptor = FernetEncrypter(secret_key) if secret_key else None

#-----------------------------------------------------------------------------

def init_log_console(level: int = logging.INFO, extra: dict | None = None, secret_key: str = ""):
    _set_secret_key(secret_key)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(JsonFormatter(extra))

    logging.root.handlers = [stream_handler]
    logging.root.setLevel(level=level)

#-----------------------------------------------------------------------------

def init_log_file(name: str, dir: str, level: int = logging.INFO, extra: dict | None = None, secret_key: str = ""):
    _set_secret_key(secret_key)

    if dir:
        os.makedirs(dir, exist_ok=True)

    formatter = JsonFormatter(extra)

    now = datetime.datetime.now()
    file_handler = logging.FileHandler(
        os.path.join(dir, f"{now.strftime('%Y-%m-%d')}_{name}_{now.strftime('%H%M%S_%f')}.log"),
        mode="w+"
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    logging.root.handlers = [file_handler, stream_handler]
    logging.root.setLevel(level=level)

#-----------------------------------------------------------------------------

def init_log(name: str = "", dir: str = "", level: int = logging.INFO, extra: dict | None = None, secret_key: str = ""):
    if name:
        init_log_file(name, dir, level, extra, secret_key)
    else:
        init_log_console(level, extra, secret_key)

#-----------------------------------------------------------------------------
