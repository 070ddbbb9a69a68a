"""
Centralized structured logger for the ECIES suite.

Provides a message + context logger on top of the standard logging module,
with level filtering, sensitive-field redaction, pluggable formatting
(text or JSON) and pluggable transports (console, file, fan-out).
"""

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from pythonjsonlogger.json import JsonFormatter

from interfaces.ecies_interfaces import Logger


class LogLevel(Enum):
    """Livelli di log esposti dal logger strutturato."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def logging_level(self) -> int:
        return _TO_LOGGING[self]

    @classmethod
    def from_logging_level(cls, levelno: int) -> "LogLevel":
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_TO_LOGGING = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}

# Chiavi di contesto che non devono mai comparire nei log
SENSITIVE_KEYS = frozenset(
    {
        "private_key",
        "privatekey",
        "receiver_private_key",
        "ephemeral_private_key",
        "shared_secret",
        "symmetric_key",
        "key",
        "plaintext",
        "secret",
    }
)

REDACTED = "[REDACTED]"


# ============================================================================
# FILTERS
# ============================================================================


class LogLevelFilter(logging.Filter):
    """Lascia passare solo i record con livello >= level."""

    def __init__(self, level: Union[str, LogLevel] = LogLevel.INFO):
        super().__init__()
        self.level = LogLevel(level)

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= self.level.logging_level


class SensitiveDataFilter(logging.Filter):
    """
    Sostituisce con [REDACTED] i valori di contesto che contengono
    materiale di chiave o plaintext.

    Non filtra mai record: li arricchisce soltanto.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            record.context = _redact(context)
        return True


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        items = [_redact(item) for item in value]
        return items if isinstance(value, list) else tuple(items)
    return value


# ============================================================================
# FORMATTERS
# ============================================================================


def _iso_timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()


class TextFormatter(logging.Formatter):
    """
    Formato testo: 2025-10-09T14:30:45.123456+00:00 [INFO]: Messaggio {"k": "v"}
    """

    def format(self, record: logging.LogRecord) -> str:
        level = LogLevel.from_logging_level(record.levelno).value.upper()
        context = getattr(record, "context", None) or {}
        context_string = json.dumps(context, default=str) if context else ""
        return f"{_iso_timestamp(record)} [{level}]: {record.getMessage()} {context_string}".rstrip()


class StructuredJsonFormatter(JsonFormatter):
    """Formato JSON: {"message", "context", "level", "timestamp"}."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("context", {})
        log_record["level"] = LogLevel.from_logging_level(record.levelno).value
        log_record["timestamp"] = _iso_timestamp(record)


def create_json_formatter() -> StructuredJsonFormatter:
    """Crea formatter JSON per log strutturati."""
    return StructuredJsonFormatter("%(message)s", json_default=str)


def create_formatter(fmt: str = "text") -> logging.Formatter:
    """Ritorna il formatter per "text" o "json"."""
    if fmt == "json":
        return create_json_formatter()
    if fmt == "text":
        return TextFormatter()
    raise ValueError(f"Formato log non supportato: {fmt}")


# ============================================================================
# TRANSPORTS
# ============================================================================


class ConsoleTransport(logging.StreamHandler):
    """Scrive i log su stdout."""

    def __init__(self, stream=None):
        super().__init__(stream if stream is not None else sys.stdout)


class FileTransport(logging.FileHandler):
    """Appende i log su file (UTF-8), creando la directory se necessario."""

    def __init__(self, file_path: Union[str, Path]):
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(path, mode="a", encoding="utf-8")


class FanOutTransport(logging.Handler):
    """Inoltra ogni record a più transport."""

    def __init__(self, transports: Iterable[logging.Handler]):
        super().__init__()
        self.transports = list(transports)

    def setFormatter(self, fmt):
        super().setFormatter(fmt)
        for transport in self.transports:
            transport.setFormatter(fmt)

    def emit(self, record: logging.LogRecord) -> None:
        for transport in self.transports:
            transport.handle(record)

    def flush(self):
        for transport in self.transports:
            transport.flush()

    def close(self):
        for transport in self.transports:
            transport.close()
        super().close()


# ============================================================================
# LOGGER
# ============================================================================


class StructuredLogger(Logger):
    """
    Logger strutturato: messaggio + dizionario di contesto.

    Il contesto viaggia nel LogRecord come attributo "context" (via extra),
    quindi formatter e filter standard di logging possono leggerlo.

    Ogni istanza possiede il logging.Logger con il suo nome (handler e
    filter vengono sostituiti). Un secondo StructuredLogger con lo stesso
    nome viene rifiutato finché il primo non è stato chiuso con close().
    """

    _active_names = set()
    _names_lock = threading.Lock()

    def __init__(
        self,
        name: str,
        formatter: Optional[logging.Formatter] = None,
        transport: Optional[logging.Handler] = None,
        level_filter: Optional[LogLevelFilter] = None,
    ):
        with StructuredLogger._names_lock:
            if name in StructuredLogger._active_names:
                raise ValueError(f"Logger '{name}' già in uso: chiudere l'istanza esistente prima")
            StructuredLogger._active_names.add(name)

        self.name = name
        self.level_filter = level_filter or LogLevelFilter(LogLevel.INFO)
        self.transport = transport or ConsoleTransport()
        self.transport.setFormatter(formatter or TextFormatter())

        self._logger = logging.getLogger(name)
        self._logger.setLevel(logging.DEBUG)
        self._logger.propagate = False  # Non propagare ai logger parent
        self._logger.handlers.clear()
        self._logger.filters.clear()
        self._logger.addFilter(self.level_filter)
        self._logger.addFilter(SensitiveDataFilter())
        self._logger.addHandler(self.transport)

    @property
    def level(self) -> LogLevel:
        return self.level_filter.level

    def set_level(self, level: Union[str, LogLevel]) -> None:
        self.level_filter.level = LogLevel(level)

    def log(self, level: Union[str, LogLevel], message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._logger.log(
            LogLevel(level).logging_level,
            message,
            extra={"context": dict(context or {})},
        )

    def close(self) -> None:
        self._logger.removeHandler(self.transport)
        self.transport.close()
        with StructuredLogger._names_lock:
            StructuredLogger._active_names.discard(self.name)


class ECIESLogger:
    """
    Factory con cache per i logger strutturati della suite ECIES.

    La cache è per nome: una seconda richiesta con lo stesso nome ritorna
    l'istanza esistente con la configurazione originale. Configurazioni
    diverse (formato, file, livello) richiedono nomi diversi.
    """

    _loggers: Dict[str, StructuredLogger] = {}
    _lock = threading.Lock()

    @staticmethod
    def get_logger(
        name: str,
        level: Union[str, LogLevel] = LogLevel.INFO,
        fmt: str = "text",
        log_file: Optional[str] = None,
        console_output: bool = True,
    ) -> StructuredLogger:
        """
        Ottiene o crea un logger configurato.

        Args:
            name: Nome del logger (es. "ECIES")
            level: Livello minimo ("debug", "info", "warn", "error")
            fmt: "text" o "json"
            log_file: File di log (opzionale)
            console_output: Se True, scrive anche su stdout

        Returns:
            StructuredLogger pronto all'uso
        """
        with ECIESLogger._lock:
            if name in ECIESLogger._loggers:
                return ECIESLogger._loggers[name]

            transports = []
            if console_output:
                transports.append(ConsoleTransport())
            if log_file:
                transports.append(FileTransport(log_file))

            if len(transports) == 1:
                transport = transports[0]
            else:
                # Nessun transport: fan-out vuoto scarta i record
                transport = FanOutTransport(transports)

            logger = StructuredLogger(
                name,
                formatter=create_formatter(fmt),
                transport=transport,
                level_filter=LogLevelFilter(level),
            )
            ECIESLogger._loggers[name] = logger
            return logger

    @staticmethod
    def set_level(name: str, level: Union[str, LogLevel]):
        """Changes log level for an existing logger."""
        if name in ECIESLogger._loggers:
            ECIESLogger._loggers[name].set_level(level)

    @staticmethod
    def clear_cache():
        """Clears logger cache and closes transports."""
        with ECIESLogger._lock:
            for logger in ECIESLogger._loggers.values():
                logger.close()
            ECIESLogger._loggers.clear()
