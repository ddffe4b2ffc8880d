"""자격 증명 조회

인라인 api_key 옵션이 비어 있을 때 이름으로 등록된 자격 증명을 찾는다.
호스트가 주입하는 순수 조회 함수이며 코어에는 포함되지 않는다.
"""

from __future__ import annotations

import os
from typing import Callable, Mapping, Optional

CredentialResolver = Callable[[str], Optional[str]]

DEFAULT_CREDENTIAL_NAME = "wunderground_api_key"


class EnvCredentials:
    """자격 증명 이름 → 대문자 환경변수 (wunderground_api_key → WUNDERGROUND_API_KEY)"""

    __slots__ = ("_environ",)

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def __call__(self, name: str) -> Optional[str]:
        value = self._environ.get(name.upper(), "").strip()
        return value or None


class StaticCredentials:
    """고정 매핑 기반 자격 증명 (테스트/설정 파일용)"""

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def __call__(self, name: str) -> Optional[str]:
        value = self._values.get(name, "").strip()
        return value or None
