import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Локальное хранилище ключ-значение (резервная копия на случай офлайна)"""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryStore:
    """Хранилище в памяти процесса"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore:
    """Все ключи в одном JSON-файле, файл перезаписывается целиком"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


def save_to_local(store: KeyValueStore, key: str, data: Any) -> None:
    """Сохранить значение как JSON; ошибки логируются и не пробрасываются"""
    try:
        store.set(key, json.dumps(data, default=str))
    except Exception:
        logger.exception("Local storage save failed for key %r", key)


def load_from_local(store: KeyValueStore, key: str) -> Any:
    """Прочитать значение; при любой ошибке возвращается None"""
    try:
        item = store.get(key)
        return json.loads(item) if item else None
    except Exception:
        logger.exception("Local storage load failed for key %r", key)
        return None


def remove_from_local(store: KeyValueStore, key: str) -> None:
    try:
        store.delete(key)
    except Exception:
        logger.exception("Local storage remove failed for key %r", key)


def clear_local(store: KeyValueStore) -> None:
    try:
        store.clear()
    except Exception:
        logger.exception("Local storage clear failed")
