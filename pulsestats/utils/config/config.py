import base64, dotenv, io, logging, os, re

from ruamel.yaml import YAML
from typing import Any

from .encrypt import AbstractEncrypter, FernetEncrypter
from .log import LogConfig
from .query import QueryConfig

#-----------------------------------------------------------------------------

_global_config = None

#-----------------------------------------------------------------------------

class Config:

    yaml = YAML()

    #-------------------------------------------------

    def __init__(
        self,
        yaml_filenames: str | list[str | io.StringIO] | None = None,
        encrypter: AbstractEncrypter | None = None
    ):
        if isinstance(yaml_filenames, str|io.StringIO):
            self._yaml_filenames = [yaml_filenames]
        elif isinstance(yaml_filenames, list):
            self._yaml_filenames = yaml_filenames
        else:
            self._yaml_filenames = []

        #-------------------------------------------------

        self._raw = {}

        #-------------------------------------------------

        self._encrypter = encrypter
        if not self._encrypter:
            self._encrypter = FernetEncrypter(self.get_fernet_key("CONFIG_ENCRYPTION_KEY"))

        #-------------------------------------------------

        # Load YAML files.
        for yaml_filename in self._yaml_filenames:
            self.load_yaml(yaml_filename)

        self.refresh()

        global _global_config
        _global_config = self

    #-----------------------------------------------------

    def refresh(self, data: dict | None = None):
        if data:
            self._raw.update({str(k).upper(): v for k, v in data.items()})

        self.log = LogConfig(
            name        = self.get_str("LOG_NAME"),
            dir         = self.get_str("LOG_DIR"),
            level       = logging.getLevelNamesMapping().get(self.get_str("LOG_LEVEL").strip().upper(), logging.INFO),
            secret_key  = self.get_fernet_key("LOG_ENCRYPTION_KEY") if self.get_str("LOG_ENCRYPTION_KEY") else ""
        )

        self.query = QueryConfig(
            timezone        = self.get_str("QUERY_TIMEZONE"),
            default_interval= self.get_str("QUERY_DEFAULT_INTERVAL")
        )


    def load_yaml(self, file: str | io.StringIO):
        if not file:
            return

        stream = None

        if isinstance(file, str):
            # Filename.
            try:
                with open(file, "r", encoding="utf-8") as f:
                    stream = io.StringIO(f.read())

            except OSError as e:
                logging.warning(f"Failed to load YAML file '{file}': {str(e)}")
                return

        elif isinstance(file, io.StringIO):
            stream = file

        if stream is None:
            return

        #-------------------------------------------------

        Config.yaml = YAML()

        modified = False

        data = Config.yaml.load(stream)
        if not isinstance(data, dict):
            return

        for key, value in data.items():
            if not isinstance(key, str):
                continue

            upper_key = key.upper()

            if self._encrypter and isinstance(value, str) and len(value) > 0:
                # Check non-empty strings.

                if self._encrypter.is_encrypted(value):
                    self._raw[upper_key] = self._encrypter.decrypt(value)
                    continue

                if re.search(r"_KEY|_PASSWORD|_PASS|_PWD|_SECRET|_TOKEN", upper_key) and \
                    value != "REPLACE_THIS_VALUE_IN_PRODUCTION":

                    encrypted = self._encrypter.encrypt(value)
                    if encrypted:
                        data[key] = encrypted
                        modified = modified or (encrypted != value)

            self._raw[upper_key] = value

        #-------------------------------------------------

        if isinstance(file, str) and modified:
            try:
                with open(file, "w+t", encoding="utf-8") as f:
                    Config.yaml.dump(data, f)

            except OSError as e:
                logging.warning(f"Failed to update YAML file '{file}': {str(e)}")

    #-----------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        stripped_key = key.strip()
        if not stripped_key:
            return default

        # Check environment variables beforehand.
        s = os.environ.get(stripped_key)
        if s is not None:
            return s

        upper_key = stripped_key.upper()
        s = os.environ.get(upper_key)
        if s is not None:
            return s

        return self._raw.get(upper_key, default)


    def get_str(self, key: str, default: str = "") -> str:
        s = self.get(key, default)
        if s is None:
            return default
        return s if isinstance(s, str) else str(s)


    def get_fernet_key(self, key: str) -> str:
        s = self.get_str(key).strip()
        if len(s) > 32:
            s = s[:32]

        return base64.urlsafe_b64encode(s.encode().ljust(32, b"0")).decode()

    #-------------------------------------------------------------------------

    @staticmethod
    def load_dotenv(filenames: str | list[str] | None = None):
        if isinstance(filenames, str):
            l = [filenames]
        elif isinstance(filenames, list):
            l = filenames
        else:
            return

        for filename in l:
            filename = filename.strip()
            if not filename or not os.path.exists(filename):
                continue

            for key, value in dotenv.dotenv_values(filename).items():
                if value:
                    value = value.strip()
                if not value:
                    continue

                key = key.strip()
                if not key:
                    continue

                os.environ.setdefault(key.upper(), value)

    #-------------------------------------------------------------------------

    @staticmethod
    def expand_yaml_filenames(yaml_filenames: str | list[str] | None, env: str = "") -> list[str]:
        yaml_file_list = []

        if isinstance(yaml_filenames, str):
            yaml_file_list.append(yaml_filenames)

        elif isinstance(yaml_filenames, list):
            yaml_file_list.extend(yaml_filenames)

        #-----------------------------------------------------
        # Fill .key.yaml files.

        temp_yaml_file_list = []

        for yaml_filename in yaml_file_list:
            if not isinstance(yaml_filename, str):
                continue

            yaml_filename = yaml_filename.strip()
            if not yaml_filename or yaml_filename in temp_yaml_file_list:
                continue

            temp_yaml_file_list.append(yaml_filename)

            if re.match(".*\\.key\\.yaml$", yaml_filename, re.IGNORECASE):
                continue

            elif not re.match(".*\\.yaml$", yaml_filename, re.IGNORECASE):
                continue

            temp_yaml_file_list.append(f"{yaml_filename[:-5]}.key.yaml")

        yaml_file_list = temp_yaml_file_list

        #-----------------------------------------------------
        # Fill .{env}.yaml and .{env}.key.yaml files.

        if env:
            if not yaml_file_list:
                return [f"config.{env}.yaml", f"config.{env}.key.yaml"]

            temp_yaml_file_list = []

            for yaml_filename in yaml_file_list:
                if yaml_filename not in temp_yaml_file_list:
                    temp_yaml_file_list.append(yaml_filename)

                if re.match(".*\\.key\\.yaml$", yaml_filename, re.IGNORECASE):
                    env_yaml_filename = f"{yaml_filename[:-9]}.{env}.key.yaml"
                else:
                    env_yaml_filename = f"{yaml_filename[:-5]}.{env}.yaml"

                if env_yaml_filename not in temp_yaml_file_list:
                    temp_yaml_file_list.append(env_yaml_filename)

            yaml_file_list = temp_yaml_file_list

        return yaml_file_list

    #-------------------------------------------------------------------------

    @staticmethod
    def init(
        yaml_filenames  : str | list[str] | None = None,
        dotenv_filenames: str | list[str] = [".env"],
        env             : str | None = None,
        log_extra       : dict | None = None
    ) -> "Config":
        from ..log import init_log, init_log_console
        init_log_console(extra=log_extra)

        Config.load_dotenv(dotenv_filenames)

        if env is None:
            env = os.environ.get("ENV", "")
        env = env.strip().lower()

        log_extra = dict(log_extra or {})
        if env:
            log_extra["env"] = env

        #-----------------------------------------------------

        final_yaml_file_list = []

        default_yaml = "config.yaml"
        if os.path.exists(default_yaml) and default_yaml not in (yaml_filenames or []):
            final_yaml_file_list.append(default_yaml)
            logging.info("Default config has been loaded.")

        for yaml_filename in Config.expand_yaml_filenames(yaml_filenames, env):
            if os.path.exists(yaml_filename):
                final_yaml_file_list.append(yaml_filename)

        config = Config(yaml_filenames=final_yaml_file_list)

        #-----------------------------------------------------

        init_log(
            name        = config.log.name,
            dir         = config.log.dir,
            level       = config.log.level,
            extra       = log_extra,
            secret_key  = config.log.secret_key
        )

        return config

#-----------------------------------------------------------------------------

def global_config() -> Config | None:
    return _global_config

#-----------------------------------------------------------------------------
