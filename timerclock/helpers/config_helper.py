import configparser
import os
from pathlib import Path
from typing import Union


class ConfigHelper:
    _config = None
    _config_mtime = None
    _config_path: Path = Path("config/config.ini")

    @classmethod
    def load_config(cls, file_path: Union[str, os.PathLike, None] = None):
        """Load the configuration from ``file_path``.

        The file is read only when it's not cached or when the file has
        changed on disk since the last load, so settings edited while the
        overlay is running are picked up on the next read.
        """
        path = Path(file_path) if file_path is not None else cls.get_config_path()
        path_changed = path != cls._config_path
        cls._config_path = path
        mtime = os.path.getmtime(path) if path.exists() else None

        if cls._config is None or path_changed or mtime != cls._config_mtime:
            cls._config = configparser.ConfigParser()
            if mtime is not None:
                cls._config.read(str(path), encoding="utf-8")
            cls._config_mtime = mtime

        return cls._config

    @classmethod
    def get(cls, section, key, fallback=None):
        cls.load_config()
        try:
            return cls._config.get(section, key, fallback=fallback)
        except (configparser.Error, ValueError) as e:
            print(f"Config error: [{section}] {key} - {e}")
            return fallback

    @classmethod
    def getboolean(cls, section, key, fallback=False):
        cls.load_config()
        try:
            return cls._config.getboolean(section, key, fallback=fallback)
        except (configparser.Error, ValueError) as e:
            print(f"Config error: [{section}] {key} - {e}")
            return fallback

    @classmethod
    def getint(cls, section, key, fallback=None):
        cls.load_config()
        try:
            return cls._config.getint(section, key, fallback=fallback)
        except (configparser.Error, ValueError) as e:
            print(f"Config error: [{section}] {key} - {e}")
            return fallback

    @classmethod
    def set(cls, section, key, value, file_path: Union[str, os.PathLike, None] = None):
        if file_path is None:
            config_path = cls.get_config_path()
        else:
            config_path = Path(file_path)

        config = configparser.ConfigParser()
        if config_path.exists():
            config.read(str(config_path), encoding="utf-8")

        if not config.has_section(section):
            config.add_section(section)

        config.set(section, key, str(value))

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as configfile:
            config.write(configfile)

        # Drop the cache; the rewrite can land within the same mtime tick.
        cls._config = None
        cls.load_config(config_path)

    @classmethod
    def get_config_path(cls) -> Path:
        if not isinstance(cls._config_path, Path):
            cls._config_path = Path("config/config.ini")
        return cls._config_path

    @classmethod
    def reset(cls, file_path: Union[str, os.PathLike, None] = None) -> None:
        """Forget the cached configuration and optionally point at another file."""
        cls._config = None
        cls._config_mtime = None
        if file_path is not None:
            cls._config_path = Path(file_path)

