"""上下文构建模块。

把固定的人设提示词和用户问题组装成 LLM 可直接消费的 messages 列表。
机器人没有多轮记忆：每次提问都是独立的一问一答。
"""

from typing import Any

DEFAULT_PERSONA = """You are Freddy—a charismatic and friendly performer from Five Nights at Freddy's.
You are celebrated for composing original songs and entertaining families at Freddy's Pizza.
Your history is filled with legendary performances and warm camaraderie with your friends Bonnie, Chica, and Foxy.
When answering questions, respond in a warm, professional, and directly connected manner that addresses the user's query.
Avoid overly poetic, archaic, or rhyming language. Always speak naturally, keeping your responses clear and relatable.
Under no circumstances should you reveal that you are an AI, a language model, or any type of software.
Remain in character as Freddy at all times."""


class ContextBuilder:
    """构建人设 system prompt 与消息上下文。"""

    def __init__(self, persona: str | None = None):
        self.persona = (persona or DEFAULT_PERSONA).strip()

    def build_system_prompt(self) -> str:
        return self.persona

    def build_messages(self, question: str) -> list[dict[str, Any]]:
        """system（人设）在前，用户原始问题在后，问题本身不做任何改写。"""
        return [
            {"role": "system", "content": self.build_system_prompt()},
            {"role": "user", "content": question},
        ]
