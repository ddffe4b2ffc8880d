"""에이전트 메모리 저장소

에이전트 ID별 AgentMemory를 보관한다. 호출당 읽기 1회(진입), 쓰기 1회(종료).
여러 프로세스가 같은 저장소를 공유한다면 에이전트별 잠금은 호스트가 책임진다.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any

from weatherwatch.models.config import AgentConfig
from weatherwatch.models.memory import AgentMemory

logger = logging.getLogger("weatherwatch.store")


class MemoryStore(ABC):
    """에이전트 메모리 저장소 인터페이스"""

    @abstractmethod
    def get(self, agent_id: str, config: AgentConfig) -> AgentMemory:
        """저장된 메모리 반환. 없으면 config 기본값으로 새로 만든다."""

    @abstractmethod
    def put(self, agent_id: str, memory: AgentMemory) -> None:
        """메모리 저장 (덮어쓰기)"""


class InMemoryMemoryStore(MemoryStore):
    """프로세스 내 dict 저장소"""

    def __init__(self) -> None:
        self._data: dict[str, AgentMemory] = {}

    def get(self, agent_id: str, config: AgentConfig) -> AgentMemory:
        memory = self._data.get(agent_id)
        if memory is None:
            return AgentMemory.initial(config)
        # 호출자가 수정해도 저장본에 영향 없도록 사본 반환
        return replace(memory)

    def put(self, agent_id: str, memory: AgentMemory) -> None:
        self._data[agent_id] = replace(memory)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._data


class JsonFileMemoryStore(MemoryStore):
    """JSON 파일 저장소

    파일 하나에 {agent_id: memory_dict} 형태로 저장하며,
    쓰기는 임시 파일 작성 후 os.replace로 교체한다.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, agent_id: str, config: AgentConfig) -> AgentMemory:
        data = self._load().get(agent_id)
        if not isinstance(data, dict):
            return AgentMemory.initial(config)
        return AgentMemory.from_dict(data, config)

    def put(self, agent_id: str, memory: AgentMemory) -> None:
        data = self._load()
        data[agent_id] = memory.to_dict()
        self._write(data)

    def _load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._set_aside(f"JSON 오류: {e}")
            return {}
        if not isinstance(data, dict):
            self._set_aside(f"최상위가 객체가 아님: {type(data).__name__}")
            return {}
        return data

    def _set_aside(self, reason: str) -> None:
        """손상된 파일을 .corrupt-<시각> 이름으로 보관"""
        backup = self._path.with_name(
            f"{self._path.name}.corrupt-{datetime.now():%Y%m%d%H%M%S%f}"
        )
        os.replace(self._path, backup)
        logger.warning(
            "메모리 파일 손상 (%s), %s 로 옮기고 빈 상태로 시작", reason, backup,
        )

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self._path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
