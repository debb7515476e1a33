# scripts/Lunes/lunes_notify.py
# -*- coding: utf-8 -*-
"""
Telegram 通知

notify_telegram 永远不会抛出异常：通知失败只记录日志，不影响主流程。
"""

from datetime import datetime, timezone
from pathlib import Path

import requests

from lunes_common import Settings, log

TELEGRAM_API = "https://api.telegram.org"


def build_message(ok: bool, stage: str, msg: str = "") -> str:
    """生成通知文本"""
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    text_lines = [
        f"🔔 Lunes 自动操作：{'✅ 成功' if ok else '❌ 失败'}",
        f"阶段：{stage}",
        f"信息：{msg}" if msg else "",
        f"时间：{timestamp}",
    ]
    return "\n".join(line for line in text_lines if line)


def send_text(bot_token: str, chat_id: str, text: str):
    resp = requests.post(
        f"{TELEGRAM_API}/bot{bot_token}/sendMessage",
        json={
            "chat_id": chat_id,
            "text": text,
            "disable_web_page_preview": True
        },
        timeout=30
    )
    if resp.status_code == 200:
        log("INFO", "Telegram 文本通知已发送")
    else:
        log("WARN", f"Telegram 消息发送失败: {resp.text}")


def send_photo(bot_token: str, chat_id: str, caption: str, screenshot_file: str):
    with open(screenshot_file, "rb") as f:
        resp = requests.post(
            f"{TELEGRAM_API}/bot{bot_token}/sendPhoto",
            data={
                "chat_id": chat_id,
                "caption": caption
            },
            files={"photo": ("screenshot.png", f, "image/png")},
            timeout=60
        )
    if resp.status_code == 200:
        log("INFO", "Telegram 截图已发送")
    else:
        log("WARN", f"Telegram 图片发送失败: {resp.text}")


def notify_telegram(settings: Settings, ok: bool, stage: str, msg: str = "", screenshot_file: str = None):
    """发送 Telegram 通知，有截图时再单独发一张图"""
    if not settings.telegram_enabled:
        log("WARN", "TELEGRAM_BOT_TOKEN 或 TELEGRAM_CHAT_ID 未设置，跳过通知")
        return

    try:
        send_text(settings.tg_bot_token, settings.tg_chat_id, build_message(ok, stage, msg))

        if screenshot_file and Path(screenshot_file).exists():
            send_photo(
                settings.tg_bot_token,
                settings.tg_chat_id,
                f"Lunes 自动操作截图（{stage}）",
                screenshot_file
            )
    except Exception as e:
        log("WARN", f"Telegram 通知失败: {e}")
