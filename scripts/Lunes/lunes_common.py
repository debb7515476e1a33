# scripts/Lunes/lunes_common.py
# -*- coding: utf-8 -*-
"""
Lunes 脚本公共工具：日志、脱敏、环境变量、运行配置
"""

import os
import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

# ==================== 工具函数 ====================

def log(level: str, msg: str):
    """统一日志格式"""
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] [{level}] {msg}")


def mask_string(s: str, show: int = 2) -> str:
    """脱敏字符串，只显示前 show 位"""
    if len(s) <= show:
        return "*" * len(s)
    return s[:show] + "*" * (len(s) - show)


def sanitize_error(msg: str, secrets=()) -> str:
    """脱敏错误信息中可能包含的敏感内容"""
    for secret in secrets:
        if secret:
            msg = msg.replace(secret, "***")
    return re.sub(r'(username|password)[=:]\s*\S+', r'\1=***', msg, flags=re.I)


def env_or_throw(name: str) -> str:
    """获取环境变量，不存在则抛出异常"""
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"环境变量 {name} 未设置")
    return value


def env_or_default(name: str, default: str = "") -> str:
    """获取环境变量，不存在则返回默认值"""
    return os.environ.get(name) or default


# ==================== 运行配置 ====================

@dataclass(frozen=True)
class Settings:
    username: str
    password: str
    tg_bot_token: Optional[str] = None
    tg_chat_id: Optional[str] = None
    output_dir: Path = Path(".")

    @property
    def telegram_enabled(self) -> bool:
        return bool(self.tg_bot_token and self.tg_chat_id)

    def screenshot_path(self, name: str) -> str:
        """生成截图路径"""
        return str(self.output_dir / f"{name}.png")


def load_settings() -> Settings:
    """
    从环境变量读取一次运行所需的全部配置
    LUNES_USERNAME / LUNES_PASSWORD 必填，缺失时抛出 ValueError
    """
    username = env_or_throw("LUNES_USERNAME")
    password = env_or_throw("LUNES_PASSWORD")

    token = env_or_default("TELEGRAM_BOT_TOKEN") or env_or_default("TG_BOT_TOKEN")
    chat_id = env_or_default("TELEGRAM_CHAT_ID") or env_or_default("TG_CHAT_ID")

    return Settings(
        username=username,
        password=password,
        tg_bot_token=token or None,
        tg_chat_id=chat_id or None,
        output_dir=Path(env_or_default("LUNES_SCREENSHOT_DIR", ".")),
    )
