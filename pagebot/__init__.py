"""pagebot - Facebook Page Messenger 聊天机器人。"""

__version__ = "0.1.0"
