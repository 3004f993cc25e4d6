"""
Thread-safe state management for the Regatta API.

Holds the loaded race snapshot (course graph, wind, polar) behind a lock.
The snapshot itself is immutable, so request handlers take a reference
once and work on it without holding the lock.
"""
import threading
import logging
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from datetime import datetime, timezone

from regatta.config import settings as regatta_settings
from regatta.data.loader import RegattaData, load_regatta_data
from regatta.errors import ConfigurationError
from regatta.optimization.engine import RegattaEngine

logger = logging.getLogger(__name__)


@dataclass
class RaceState:
    """
    Thread-safe container for the race snapshot.

    Loading happens lazily on first access. A failed load is remembered
    and re-raised as ``ConfigurationError`` until ``reload`` or ``set_data``
    succeeds.
    """
    data_dir: Path = field(default_factory=lambda: Path(regatta_settings.data_dir))
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    _data: Optional[RegattaData] = None
    _engine: Optional[RegattaEngine] = None
    _load_error: Optional[str] = None

    def _load(self) -> None:
        try:
            data = load_regatta_data(self.data_dir)
            engine = data.engine(regatta_settings.sailing_mode_thresholds())
        except (ConfigurationError, FileNotFoundError) as e:
            self._data = None
            self._engine = None
            self._load_error = str(e)
            logger.error(f"Failed to load regatta data from {self.data_dir}: {e}")
            return

        self._data = data
        self._engine = engine
        self._load_error = None
        logger.info(f"Regatta data loaded: {data.summary()}")

    def _ensure_loaded(self) -> None:
        if self._data is None and self._load_error is None:
            self._load()
        if self._load_error is not None:
            raise ConfigurationError(self._load_error)

    @property
    def data(self) -> RegattaData:
        """Get the loaded race data (thread-safe read)."""
        with self._lock:
            self._ensure_loaded()
            return self._data

    @property
    def engine(self) -> RegattaEngine:
        """Get the engine for the loaded race data (thread-safe read)."""
        with self._lock:
            self._ensure_loaded()
            return self._engine

    @property
    def load_error(self) -> Optional[str]:
        with self._lock:
            return self._load_error

    @property
    def is_loaded(self) -> bool:
        with self._lock:
            return self._data is not None

    def preload(self) -> bool:
        """Load now if nothing is loaded yet. Returns False if loading failed."""
        with self._lock:
            try:
                self._ensure_loaded()
            except ConfigurationError:
                return False
            return True

    def reload(self, data_dir: Optional[Path] = None) -> None:
        """Reload race data, optionally from a different directory."""
        with self._lock:
            if data_dir is not None:
                self.data_dir = Path(data_dir)
            self._data = None
            self._engine = None
            self._load_error = None
            self._load()

    def set_data(self, data: RegattaData) -> None:
        """Install an already-loaded snapshot."""
        with self._lock:
            self._data = data
            self._engine = data.engine(regatta_settings.sailing_mode_thresholds())
            self._load_error = None
            logger.info("Regatta data replaced")


class ApplicationState:
    """
    Process-wide holder for the race state and server start time.

    Created once; every ``ApplicationState()`` call returns the same object.
    """

    _instance: Optional['ApplicationState'] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                # Double-check locking
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self._race_state = RaceState()
        self._startup_time = datetime.now(timezone.utc)

        logger.info(f"Application state initialized (race data: {self._race_state.data_dir})")

    @property
    def race(self) -> RaceState:
        return self._race_state

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    def health_check(self) -> Dict[str, Any]:
        """
        Report race data status without triggering a load.

        ``race_data`` is one of healthy, unhealthy (last load failed) or
        not_loaded.
        """
        race = self._race_state
        if race.is_loaded:
            race_status = 'healthy'
        elif race.load_error is not None:
            race_status = 'unhealthy'
        else:
            race_status = 'not_loaded'
        return {
            'race_data': race_status,
            'load_error': race.load_error,
            'uptime_seconds': self.uptime_seconds,
        }


def get_app_state() -> ApplicationState:
    """Get the application state singleton."""
    return ApplicationState()


def get_race_state() -> RaceState:
    """Get the race state manager."""
    return get_app_state().race
