"""로깅 설정

콘솔 + 파일 로깅을 구성한다.
터미널 출력일 때만 레벨 이름에 컬러를 입힌다.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable


# ANSI 컬러 코드
_COLORS = {
    "DEBUG": "\033[36m",     # Cyan
    "INFO": "\033[32m",      # Green
    "WARNING": "\033[33m",   # Yellow
    "ERROR": "\033[31m",     # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}

# 내부 로그가 많은 서드파티 로거
_NOISY_LOGGERS = ("aiohttp", "asyncio")


class ColorFormatter(logging.Formatter):
    """컬러 로그 포매터 (다른 핸들러에 영향 없도록 레코드 사본에 적용)"""

    def format(self, record: logging.LogRecord) -> str:
        color = _COLORS.get(record.levelname, "")
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname:<8}{_COLORS['RESET']}"
        return super().format(colored)


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    quiet: Iterable[str] = _NOISY_LOGGERS,
) -> None:
    """로깅 초기화

    Args:
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR)
        log_file: 로그 파일 경로 (None이면 콘솔만)
        quiet: WARNING 이상만 남길 로거 이름들
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s │ %(message)s"
    if sys.stdout.isatty():
        console.setFormatter(ColorFormatter(fmt=fmt, datefmt="%H:%M:%S"))
    else:
        console.setFormatter(logging.Formatter(fmt=fmt, datefmt="%H:%M:%S"))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        root.addHandler(fh)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
