import logging
import logging.config
import pathlib
import threading
import typing

LOG_FILENAME = "eqrewrite.log"


class EqLogger(logging.Logger):
    """Logger with a per-thread Mapped Diagnostic Context (MDC)."""

    _mdc_local: "threading.local" = threading.local()

    @classmethod
    def mdc(cls) -> typing.Mapping[str, typing.Any]:
        if getattr(cls._mdc_local, "mdc", None) is None:
            cls.set_mdc({"rule": ""})
        return getattr(cls._mdc_local, "mdc", {})

    @classmethod
    def set_mdc(cls, d: dict[str, typing.Any]) -> None:
        cls._mdc_local.mdc = d

    # ---------------------------------------------------------------------
    # MDC helpers
    # ---------------------------------------------------------------------
    @classmethod
    def add_mdc(cls, key: str, value: typing.Any) -> None:
        """Add or update a key/value pair to the thread-local MDC."""
        d = dict(cls.mdc())
        d[key] = value
        cls.set_mdc(d)

    @classmethod
    def remove_mdc(cls, key: str) -> None:
        """Remove *key* from the MDC if present."""
        d = dict(cls.mdc())
        d.pop(key, None)
        cls.set_mdc(d)

    # The rule currently being searched/applied, so formatters can tag
    # every record emitted while it runs.
    @classmethod
    def update_rule(cls, rule_name: str) -> None:
        cls.add_mdc("rule", rule_name)

    @classmethod
    def reset_rule(cls) -> None:
        cls.remove_mdc("rule")

    def makeRecord(
        self,
        name,
        level,
        fn,
        lno,
        msg,
        args,
        exc_info,
        func=None,
        extra: dict[str, typing.Any] | None = None,
        sinfo=None,
    ):
        """Inject the current MDC into every ``LogRecord`` that we create."""
        if not extra:
            extra = {}
        extra.update(self.mdc())
        return super().makeRecord(
            name,
            level,
            fn,
            lno,
            msg,
            args,
            exc_info,
            func=func,
            extra=extra,
            sinfo=sinfo,
        )


class EqFormatter(logging.Formatter):
    """Formatter that renders the MDC rule name, if any."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        rule = getattr(record, "rule", "")
        if rule and not str(rule).startswith(" ["):
            record.rule = f" [{rule}]"
        elif not rule:
            record.rule = ""

        return super().format(record)


# "filename" is filled in by configure_loggers.
conf: dict[str, typing.Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "EqFormatter": {
            "()": EqFormatter,
            "format": "%(asctime)s - %(name)s - %(levelname)s%(rule)s - %(message)s",
        },
    },
    "handlers": {
        "consoleHandler": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "EqFormatter",
            "stream": "ext://sys.stdout",
        },
        "defaultFileHandler": {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "EqFormatter",
            "filename": None,  # Placeholder, will be set dynamically
        },
    },
    "loggers": {
        "eqrewrite": {
            "level": "INFO",
            "handlers": ["consoleHandler", "defaultFileHandler"],
            "propagate": False,
        },
        "eqrewrite.rewrite": {
            "level": "INFO",
            "handlers": ["consoleHandler", "defaultFileHandler"],
            "propagate": False,
        },
        "eqrewrite.stats": {
            "level": "INFO",
            "handlers": ["defaultFileHandler"],
            "propagate": False,
        },
    },
    "root": {
        "level": "WARNING",
        "handlers": ["consoleHandler"],
    },
}


def configure_loggers(log_dir: str | pathlib.Path) -> None:
    """Install console and file logging for the eqrewrite logger tree.

    Creates `log_dir` if needed and writes to ``<log_dir>/eqrewrite.log``.
    """
    log_dir = pathlib.Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    conf["handlers"]["defaultFileHandler"]["filename"] = (
        log_dir / LOG_FILENAME
    ).as_posix()

    logging.config.dictConfig(conf)


def getLogger(name: str, default_level: int = logging.NOTSET) -> EqLogger:
    """Return an :class:`EqLogger`.

    The stdlib logger registered under `name` is replaced in the manager by
    an ``EqLogger`` carrying over its handlers, filters and parent, so that
    later ``logging.getLogger(name)`` calls return the subclass too. A logger
    that has neither handlers nor propagation gets propagation re-enabled so
    its records are not silently dropped.
    """

    name = name or __name__
    base = logging.getLogger(name)
    if isinstance(base, EqLogger):
        return base
    loglvl = base.level
    if loglvl == logging.NOTSET or loglvl < default_level:
        loglvl = default_level
    new = EqLogger(base.name, level=loglvl)
    new.handlers = list(base.handlers)
    new.filters = list(base.filters)
    new.propagate = base.propagate
    new.disabled = base.disabled
    new.parent = base.parent
    if not new.handlers and not new.propagate:
        new.propagate = True

    # Re-point children created before the swap, and placeholders that
    # will fix up our parent once an ancestor logger gets created.
    for node in logging.Logger.manager.loggerDict.values():
        if isinstance(node, logging.Logger) and node.parent is base:
            node.parent = new
        elif isinstance(node, logging.PlaceHolder) and base in node.loggerMap:
            del node.loggerMap[base]
            node.append(new)

    logging.Logger.manager.loggerDict[name] = new
    return new
