"""Plan 中的原子动作（Effect）。

Resolver 只产出这些不可变的描述，真正的外部调用全部由 EffectExecutor 完成。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SendText:
    to: str
    text: str


@dataclass(frozen=True)
class SendTypingState:
    to: str
    on: bool


@dataclass(frozen=True)
class AskAI:
    """调用 AI 接口，答案留给后面的 SendAnswer 使用。"""
    question: str


@dataclass(frozen=True)
class SendAnswer:
    to: str


@dataclass(frozen=True)
class FetchAndRelayMedia:
    to: str
    source_url: str


@dataclass(frozen=True)
class PostToFeed:
    """发帖到主页动态，结果留给后面的 ReportPostOutcome 使用。"""
    text: str


@dataclass(frozen=True)
class ReportPostOutcome:
    to: str


@dataclass(frozen=True)
class ResetSession:
    pass


@dataclass(frozen=True)
class NoOp:
    pass


Effect = (
    SendText
    | SendTypingState
    | AskAI
    | SendAnswer
    | FetchAndRelayMedia
    | PostToFeed
    | ReportPostOutcome
    | ResetSession
    | NoOp
)

Plan = tuple[Effect, ...]
