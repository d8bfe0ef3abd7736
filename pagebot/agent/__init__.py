"""模块说明：__init__。"""

from pagebot.agent.context import ContextBuilder
from pagebot.agent.executor import EffectExecutor
from pagebot.agent.intents import classify, classify_event
from pagebot.agent.loop import AgentLoop
from pagebot.agent.resolver import resolve

__all__ = ["AgentLoop", "ContextBuilder", "EffectExecutor", "classify", "classify_event", "resolve"]
