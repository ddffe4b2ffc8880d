"""호스트 에이전트 패키지

Multi-Agent 아키텍처:
  OrchestratorAgent - 총괄 조율
  InputAgent        - 예보 신호 입력
  AlertMonitorAgent - 특보 폴링 (AlertAgentCore 구동)
  NotifierAgent     - 특보 알림 발송
  HealthAgent       - working 상태 감시
"""

from weatherwatch.agents.base import BaseAgent, AgentLifecycle
from weatherwatch.agents.orchestrator import OrchestratorAgent
from weatherwatch.agents.input_agent import InputAgent
from weatherwatch.agents.monitor_agent import AlertMonitorAgent
from weatherwatch.agents.notifier_agent import NotifierAgent
from weatherwatch.agents.health_agent import HealthAgent

__all__ = [
    "BaseAgent",
    "AgentLifecycle",
    "OrchestratorAgent",
    "InputAgent",
    "AlertMonitorAgent",
    "NotifierAgent",
    "HealthAgent",
]
