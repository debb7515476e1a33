# scripts/Lunes/lunes_checks.py
# -*- coding: utf-8 -*-
"""
Lunes 面板页面状态判断

页面文案随面板更新而变化，所有匹配规则集中在这里，流程代码只调用判断函数。
"""

import re

# ==================== 匹配规则 ====================
HUMAN_CHECK_PATTERN = re.compile(r"Verify you are human|需要验证|安全检查|review the security", re.I)
LOGGED_IN_PATTERN = re.compile(r"Dashboard|Logout|Sign out|控制台|面板", re.I)
LOGIN_ERROR_PATTERN = re.compile(r"Invalid|incorrect|错误|失败|无效", re.I)
LOGIN_PATH_PATTERN = re.compile(r"/auth/login", re.I)


def is_challenge_page(content: str) -> bool:
    """是否为 Cloudflare 等人机验证页面"""
    return bool(HUMAN_CHECK_PATTERN.search(content or ""))


def is_login_url(url: str) -> bool:
    return bool(LOGIN_PATH_PATTERN.search(url or ""))


def has_logged_in_hint(content: str) -> bool:
    return bool(LOGGED_IN_PATTERN.search(content or ""))


def is_logged_in(url: str, content: str) -> bool:
    """
    登录成功判断：已离开登录页，或页面出现登录后的文案。
    两者满足其一即可，有的面板跳转慢，有的面板 URL 不变只替换内容。
    """
    return not is_login_url(url) or has_logged_in_hint(content)


def find_login_error(content: str) -> str:
    """返回页面中第一行疑似登录错误的文本，没有则返回空字符串"""
    for line in (content or "").splitlines():
        line = line.strip()
        if line and LOGIN_ERROR_PATTERN.search(line):
            return line
    return ""
