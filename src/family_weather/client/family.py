# src/family_weather/client/family.py
from __future__ import annotations
import json
import os
from typing import Dict, Optional, Protocol

FAMILY_KEY = "family_info"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """세션 간 유지되는 로컬 저장소 (JSON 파일 하나)"""

    def __init__(self, path: str) -> None:
        self.path = path

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)


class FamilySettings:
    """가족 구성/옷차림 선호 자유 텍스트. 시작 시 한 번 읽고, 수정할 때마다 저장."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._family = store.get(FAMILY_KEY) or ""

    @property
    def family(self) -> str:
        return self._family

    def set_family(self, value: str) -> None:
        self._family = value
        self._store.set(FAMILY_KEY, value)
