import dataclasses
import json
import os
import pathlib
import typing

from .logging import getLogger

logger = getLogger(__name__)

DEFAULT_APPLICATION_LIMIT = 10_000


def _get_default_home_dir() -> pathlib.Path:
    """Return the default eqrewrite home directory.

    ``$EQREWRITE_HOME`` wins when set, otherwise ``~/.eqrewrite``.
    """
    env = os.environ.get("EQREWRITE_HOME")
    if env:
        return pathlib.Path(env)
    return pathlib.Path.home() / ".eqrewrite"


@dataclasses.dataclass(frozen=True, slots=True)
class ConfigConstants:
    OPTIONS_FILENAME: typing.ClassVar[str] = "options.json"

    @staticmethod
    def default_log_dir(home_dir: pathlib.Path | None = None) -> pathlib.Path:
        """Return the default log directory based on the home dir."""
        base = home_dir if home_dir is not None else _get_default_home_dir()
        return base / "logs"


@dataclasses.dataclass(slots=True)
class RuleConfiguration:
    """
    Per-rule overrides, keyed by rule name.

    >>> rule = RuleConfiguration(name="commute-add", application_limit=50)
    >>> rule.to_dict()
    {'name': 'commute-add', 'is_activated': True, 'application_limit': 50}
    >>> data = {'name': 'mul-0', 'is_activated': False}
    >>> RuleConfiguration.from_dict(data).is_activated
    False
    """

    name: str | None = None
    is_activated: bool = True
    application_limit: int | None = None

    def to_dict(self) -> dict[str, typing.Any]:
        """Serializes the rule configuration to a dictionary."""
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, typing.Any]) -> "RuleConfiguration":
        """Creates a RuleConfiguration instance from a dictionary."""
        return cls(**data)


class RewriteConfiguration:
    """
    Application-wide options loaded from a JSON file, with dictionary-like
    access.

    Recognized keys:

    - ``application_limit``: default limit for rules built with
      :meth:`RewriteBuilder.with_configuration`.
    - ``log_dir``: where :func:`configure_loggers` should write.
    - ``rules``: list of :class:`RuleConfiguration` dicts.

    >>> import tempfile
    >>> temp_dir = tempfile.TemporaryDirectory()
    >>> config_path = pathlib.Path(temp_dir.name) / "options.json"
    >>> config_path.write_text('{"application_limit": 64}')
    25
    >>> config = RewriteConfiguration(config_path)
    >>> config.application_limit
    64
    >>> config.limit_for("anything")
    64
    >>> temp_dir.cleanup()
    """

    def __init__(
        self,
        config_path: pathlib.Path | str | None = None,
        *,
        home_dir: pathlib.Path | str | None = None,
    ):
        """
        Initializes and loads the configuration.

        Args:
            config_path: Path to the JSON config file. If None, defaults to
                         'options.json' in the home directory.
            home_dir: Overrides ``$EQREWRITE_HOME`` / ``~/.eqrewrite``.
        """
        self._home_dir = (
            pathlib.Path(home_dir) if home_dir is not None else _get_default_home_dir()
        )
        if config_path is not None:
            self.config_file = pathlib.Path(config_path)
        else:
            self.config_file = self._home_dir / ConfigConstants.OPTIONS_FILENAME

        self._options: dict[str, typing.Any] = {}
        self._load()

    def _load(self) -> None:
        """Loads configuration from the JSON file, handling potential errors."""
        try:
            with self.config_file.open("r", encoding="utf-8") as fp:
                self._options = json.load(fp)
            logger.info("Loaded configuration from %s", self.config_file)
        except FileNotFoundError:
            logger.debug("Configuration file %s not found", self.config_file)
            self._options = {}
        except json.JSONDecodeError:
            logger.error("Failed to parse config file: %s", self.config_file)
            logger.warning("No valid configuration found; using defaults in memory.")
            self._options = {}

    def save(self) -> None:
        """Saves the current configuration to the JSON file."""
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with self.config_file.open("w", encoding="utf-8") as fp:
                json.dump(self._options, fp, indent=2)
            logger.info("Configuration saved to %s", self.config_file)
        except IOError as e:
            logger.error("Failed to save configuration to %s: %s", self.config_file, e)

    @property
    def home_dir(self) -> pathlib.Path:
        return self._home_dir

    @property
    def log_dir(self) -> pathlib.Path:
        """Returns the configured log directory, or the default under home."""
        path_str = self._options.get("log_dir")
        if not path_str:
            path_str = str(ConfigConstants.default_log_dir(self._home_dir))
            self._options["log_dir"] = path_str
        return pathlib.Path(path_str)

    @property
    def application_limit(self) -> int:
        return int(self._options.get("application_limit", DEFAULT_APPLICATION_LIMIT))

    @property
    def rules(self) -> list[RuleConfiguration]:
        return [RuleConfiguration.from_dict(r) for r in self._options.get("rules", [])]

    def rule(self, name: str) -> RuleConfiguration | None:
        """Return the overrides for rule `name`, if the file has any."""
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def limit_for(self, name: str) -> int:
        """Application limit for rule `name`: its own override, else the default."""
        rule = self.rule(name)
        if rule is not None and rule.application_limit is not None:
            return rule.application_limit
        return self.application_limit

    def is_active(self, name: str) -> bool:
        rule = self.rule(name)
        return rule is None or rule.is_activated

    def select(self, rewrites: typing.Iterable[typing.Any]) -> list[typing.Any]:
        """Drop the rewrites whose name is deactivated in this configuration."""
        selected = []
        for rewrite in rewrites:
            if self.is_active(rewrite.name):
                selected.append(rewrite)
            else:
                logger.debug("Rule %s is deactivated, skipping", rewrite.name)
        return selected

    def __getitem__(self, name: str) -> typing.Any:
        """Provides dictionary-style read access."""
        return self._options[name]

    def __setitem__(self, name: str, value: typing.Any) -> None:
        """Provides dictionary-style write access."""
        self._options[name] = value

    def get(self, name: str, default: typing.Any = None) -> typing.Any:
        """Provides dictionary-style read access with a default value."""
        return self._options.get(name, default)

    def set(self, name: str, value: typing.Any) -> None:
        """Provides dictionary-style write access."""
        self._options[name] = value
