"""기상 특보 감시 에이전트 - CLI 진입점

사용 예시:
    python -m weatherwatch.main --location 94103 \
        --conditions "Chance of a Thunderstorm" --memory-file memory.json

    python -m weatherwatch.main --location 94103 --once

API 키는 --api-key 또는 WUNDERGROUND_API_KEY 환경변수로 지정한다.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import signal
import sys
from typing import Any, Optional

from weatherwatch.agents.monitor_agent import AlertMonitorAgent
from weatherwatch.agents.orchestrator import OrchestratorAgent
from weatherwatch.models.alerts import InboundSignal
from weatherwatch.models.config import AgentConfig
from weatherwatch.skills.credentials import EnvCredentials
from weatherwatch.skills.notifier import SUPPORTED_METHODS, NotifierSkill
from weatherwatch.skills.parser import ParserSkill
from weatherwatch.skills.validation import DEFAULT_OPTIONS, ValidationSkill
from weatherwatch.store.memory_store import (
    InMemoryMemoryStore,
    JsonFileMemoryStore,
    MemoryStore,
)
from weatherwatch.utils.logging_config import setup_logging


BANNER = r"""
  ╔══════════════════════════════════════════════╗
  ║   기상 특보 감시 에이전트 v1.0.0             ║
  ║   Weather Alert Watcher                      ║
  ║   Adaptive Polling Agent                     ║
  ╚══════════════════════════════════════════════╝
"""


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="기상 특보 감시 에이전트 (적응형 폴링)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "예시:\n"
            "  python -m weatherwatch.main --location 94103 "
            "--conditions \"Thunderstorm\"\n"
            "  python -m weatherwatch.main --location 94103 --once"
        ),
    )
    p.add_argument("-l", "--location", help="조회 위치 (예: 94103, CA/San_Francisco)")
    p.add_argument("-c", "--conditions", help="최근 예보 문구 (악기상 주시 판단용)")
    p.add_argument(
        "--api-key",
        default=None,
        help="Wunderground API 키 (기본: WUNDERGROUND_API_KEY 환경변수)",
    )
    p.add_argument(
        "--default-schedule",
        default=DEFAULT_OPTIONS["default_check_schedule"],
        help="평시 조회 주기 (기본: every_30m)",
    )
    p.add_argument(
        "--on-alert-schedule",
        default=DEFAULT_OPTIONS["on_alert_check_schedule"],
        help="특보/주시 중 조회 주기 (기본: every_10m)",
    )
    p.add_argument(
        "--expected-update-days",
        default=DEFAULT_OPTIONS["expected_update_period_in_days"],
        help="이벤트 생성 기대 주기 (일, 기본: 1)",
    )
    p.add_argument("--agent-id", default="weather_alert", help="에이전트 ID (메모리 키)")
    p.add_argument("--memory-file", default=None, help="메모리 저장 JSON 파일 경로")
    p.add_argument(
        "--notify",
        default="log",
        help=f"알림 방법 ({','.join(SUPPORTED_METHODS)} 콤마 구분)",
    )
    p.add_argument("--once", action="store_true", help="1회 조회 후 종료")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    p.add_argument("--log-file", default=None, help="로그 파일 경로")
    return p


def build_config(args: argparse.Namespace) -> AgentConfig:
    """CLI 인자 + 환경변수 → AgentConfig. 검증 실패 시 ValueError."""
    options: dict[str, Any] = {
        "location": args.location or "",
        "api_key": args.api_key or "",
        "default_check_schedule": args.default_schedule,
        "on_alert_check_schedule": args.on_alert_schedule,
        "expected_update_period_in_days": args.expected_update_days,
    }
    methods = [m.strip() for m in args.notify.split(",") if m.strip()]
    unknown = [m for m in methods if m not in SUPPORTED_METHODS]
    if unknown:
        raise ValueError(f"지원하지 않는 알림 방법: {', '.join(unknown)}")

    validator = ValidationSkill(credentials=EnvCredentials())
    return validator.build_config(
        options,
        notification_methods=methods or ["log"],
        webhook_url=os.environ.get("WEATHERWATCH_WEBHOOK_URL", ""),
    )


def build_store(path: Optional[str]) -> MemoryStore:
    if path:
        return JsonFileMemoryStore(path)
    return InMemoryMemoryStore()


def interactive_input() -> InboundSignal:
    """대화형 입력으로 초기 신호 생성"""
    print("  대화형 모드 - 아래 정보를 입력하세요\n")
    while True:
        location = input("  위치 (예: 94103): ").strip()
        if location:
            break
        print("  [오류] 위치를 입력해야 합니다\n")
    conditions = input("  최근 예보 (생략 가능): ").strip()
    return InboundSignal(location=location, conditions=conditions or None)


async def run_once(
    agent_id: str,
    config: AgentConfig,
    store: MemoryStore,
    signal_in: Optional[InboundSignal],
) -> int:
    """1회 조회 모드. 특보가 있으면 종료 코드 1."""
    sink = NotifierSkill(
        methods=config.notification_methods,
        webhook_url=config.webhook_url,
    )
    monitor = AlertMonitorAgent(agent_id, config, store=store, sink=sink)
    try:
        if signal_in is not None:
            await monitor.receive(signal_in)
        outcome = await monitor.check_once()
    finally:
        await monitor.core.source.close()

    memory = monitor.memory
    print(
        f"\n  위치: {memory.location or '-'}  "
        f"주시: {memory.watch_alerts}  특보: {memory.have_alerts}  "
        f"다음 조회: {memory.current_interval:.0f}초 후"
    )
    if outcome is None:
        print("  조회하지 못했습니다 (로그 참조)")
        return 2
    for alert in outcome.payload:
        print(f"  - {alert.description} (~{alert.expires_short or '?'})")
    return 1 if outcome.emitted else 0


async def run(
    agent_id: str,
    config: AgentConfig,
    store: MemoryStore,
    signal_in: Optional[InboundSignal],
) -> None:
    """OrchestratorAgent 기반 실행"""
    orchestrator = OrchestratorAgent(config, agent_id=agent_id, store=store)

    loop = asyncio.get_running_loop()

    def _signal_handler() -> None:
        print("\n\n  Ctrl+C 감지 - 감시 중지 중...")
        orchestrator.stop()

    if sys.platform != "win32":
        loop.add_signal_handler(signal.SIGINT, _signal_handler)
        loop.add_signal_handler(signal.SIGTERM, _signal_handler)

    print("  중지하려면 Ctrl+C를 누르세요\n")

    try:
        metrics = await orchestrator.run(
            [signal_in] if signal_in is not None else [],
        )
        print(f"\n{metrics.summary()}")
    except KeyboardInterrupt:
        orchestrator.stop()


def cli_entry() -> None:
    """CLI 진입점 (pyproject.toml scripts에서 호출)"""
    main()


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(
        level=args.log_level,
        log_file=args.log_file,
    )

    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    store = build_store(args.memory_file)
    signal_in: Optional[InboundSignal] = ParserSkill.parse_cli(args)
    if signal_in is not None and signal_in.is_empty:
        stored = store.get(args.agent_id, config)
        if not stored.has_location and sys.stdin.isatty():
            signal_in = interactive_input()
        else:
            signal_in = None

    print(BANNER)

    try:
        if args.once:
            sys.exit(asyncio.run(run_once(args.agent_id, config, store, signal_in)))
        asyncio.run(run(args.agent_id, config, store, signal_in))
    except KeyboardInterrupt:
        print("\n  프로그램 종료")
        sys.exit(0)


if __name__ == "__main__":
    main()
