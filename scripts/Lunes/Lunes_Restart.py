# scripts/Lunes/Lunes_Restart.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Lunes 自动重启脚本
功能：
1. 使用账号密码登录 https://ctrl.lunes.host/
2. 检测人机验证页面
3. 进入指定服务器的 Console
4. 点击 Restart 并输入检测命令
5. 每个阶段发送 Telegram 通知（带截图）
配置变量:
- LUNES_USERNAME / LUNES_PASSWORD (必填)
- TELEGRAM_BOT_TOKEN / TELEGRAM_CHAT_ID (可选，未设置则跳过通知)
- LUNES_SCREENSHOT_DIR (可选，默认当前目录)
退出码: 0 完成, 1 登录失败或异常, 2 人机验证拦截
"""

import sys
import traceback

from playwright.sync_api import sync_playwright, Error as PlaywrightError

from lunes_checks import find_login_error, is_challenge_page, is_logged_in, is_login_url
from lunes_common import Settings, load_settings, log, mask_string, sanitize_error
from lunes_notify import notify_telegram

# ==================== 配置 ====================
LOGIN_URL = "https://ctrl.lunes.host/auth/login"
SERVER_ID = "71178ed1"
SERVER_LINK = f'a[href="/server/{SERVER_ID}"]'
CONSOLE_MENU = f'a[href="/server/{SERVER_ID}"].active'
RESTART_BUTTON = 'button:has-text("Restart")'
COMMAND_INPUT = 'input[placeholder="Type a command..."]'
DIAGNOSTIC_COMMAND = "working properly"

RESTART_WAIT_MS = 10000
COMMAND_WAIT_MS = 5000

VIEWPORT = {"width": 1366, "height": 768}
LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_HUMAN_CHECK = 2

# ==================== 工具函数 ====================

def take_screenshot(page, settings: Settings, name: str) -> str:
    sp = settings.screenshot_path(name)
    page.screenshot(path=sp, full_page=True)
    log("INFO", f"📸 截图: {sp}")
    return sp


def page_text(page) -> str:
    return page.locator("body").inner_text()


def wait_visible(page, selector: str, timeout: int):
    elem = page.locator(selector)
    elem.wait_for(state="visible", timeout=timeout)
    return elem


def read_login_error(page) -> str:
    """读取页面上的登录错误信息，读不到返回空字符串"""
    try:
        return find_login_error(page_text(page))
    except PlaywrightError as e:
        log("DEBUG", f"读取错误信息失败: {e}")
        return ""


# ==================== 业务逻辑 ====================

def submit_credentials(page, settings: Settings):
    """填写账号密码并提交"""
    log("INFO", "查找登录表单...")
    user_input = wait_visible(page, 'input[name="username"]', 30000)
    pass_input = wait_visible(page, 'input[name="password"]', 30000)

    user_input.fill(settings.username)
    pass_input.fill(settings.password)
    log("INFO", "✅ 账号密码已填写")

    login_btn = wait_visible(page, 'button[type="submit"]', 15000)
    take_screenshot(page, settings, "02-before-submit")

    login_btn.click(timeout=10000)
    log("INFO", "✅ 点击登录按钮")
    try:
        page.wait_for_load_state("networkidle", timeout=30000)
    except PlaywrightError as e:
        log("DEBUG", f"等待 networkidle 超时，继续: {e}")


def restart_server(page, settings: Settings):
    """进入服务器 Console，点击 Restart 并执行命令"""
    # 进入服务器详情
    log("INFO", f"📍 进入服务器页面 ({mask_string(SERVER_ID, 4)})...")
    server_link = wait_visible(page, SERVER_LINK, 20000)
    server_link.click(timeout=10000)
    page.wait_for_load_state("networkidle", timeout=30000)

    sp_server = take_screenshot(page, settings, "04-server-page")
    notify_telegram(settings, True, "进入服务器页面", "已成功打开服务器详情", sp_server)

    # 点击 Console 菜单
    log("INFO", "📍 打开 Console...")
    console_menu = wait_visible(page, CONSOLE_MENU, 15000)
    console_menu.click(timeout=5000)
    page.wait_for_load_state("networkidle", timeout=10000)
    take_screenshot(page, settings, "05-console-page")

    # 点击 Restart，只通知已发出重启，不等待重启完成
    log("INFO", "🔄 点击 Restart 按钮...")
    restart_btn = wait_visible(page, RESTART_BUTTON, 15000)
    restart_btn.click()
    notify_telegram(settings, True, "点击 Restart", "VPS 正在重启")

    page.wait_for_timeout(RESTART_WAIT_MS)

    # 输入命令并回车
    log("INFO", "⌨️ 输入命令...")
    command_input = wait_visible(page, COMMAND_INPUT, 20000)
    command_input.fill(DIAGNOSTIC_COMMAND)
    command_input.press("Enter")

    # 等待输出稳定
    page.wait_for_timeout(COMMAND_WAIT_MS)

    sp_command = take_screenshot(page, settings, "06-command-executed")
    notify_telegram(settings, True, "命令执行完成", "restart.sh 已执行", sp_command)


def run_workflow(page, settings: Settings) -> int:
    """执行完整流程，返回退出码"""
    # 1. 打开登录页
    log("INFO", f"🔗 访问 {LOGIN_URL}...")
    page.goto(LOGIN_URL, wait_until="domcontentloaded", timeout=60000)

    if is_challenge_page(page_text(page)):
        sp = take_screenshot(page, settings, "01-human-check")
        log("ERROR", "❌ 检测到人机验证页面")
        notify_telegram(settings, False, "打开登录页", "检测到人机验证页面", sp)
        return EXIT_HUMAN_CHECK

    # 2. 输入用户名密码
    submit_credentials(page, settings)

    # 3. 登录结果
    sp_after = take_screenshot(page, settings, "03-after-submit")
    url = page.url
    content = page_text(page)
    log("INFO", f"当前 URL: {url}")

    if is_logged_in(url, content):
        error_hint = find_login_error(content)
        if error_hint:
            log("WARN", f"登录判定为成功，但页面含错误提示: {error_hint}")

        log("INFO", "✅ 登录成功")
        notify_telegram(settings, True, "登录成功", f"当前 URL：{url}", sp_after)

        restart_server(page, settings)
        log("INFO", "✅ 全部完成")
        return EXIT_OK

    # 登录失败处理
    error_msg = read_login_error(page)
    log("ERROR", f"❌ 登录失败: {error_msg or '仍在登录页'}")
    notify_telegram(
        settings,
        False,
        "登录失败",
        f"疑似失败（{error_msg}）" if error_msg else "仍在登录页",
        sp_after
    )
    return EXIT_FAILED


# ==================== 主函数 ====================

def main() -> int:
    """主函数，返回退出码"""
    log("INFO", "=" * 50)
    log("INFO", "🚀 Lunes 自动重启脚本启动")
    log("INFO", "=" * 50)

    try:
        settings = load_settings()
    except ValueError as e:
        log("ERROR", str(e))
        return EXIT_FAILED

    log("INFO", f"👤 账号: {mask_string(settings.username)}")
    settings.output_dir.mkdir(parents=True, exist_ok=True)

    log("INFO", "🌐 启动浏览器...")
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True, args=LAUNCH_ARGS)
        context = browser.new_context(viewport=VIEWPORT)
        page = context.new_page()

        try:
            return run_workflow(page, settings)

        except Exception as e:
            secrets = (settings.username, settings.password)
            error_msg = sanitize_error(str(e), secrets)
            log("ERROR", f"💥 发生异常: {error_msg}")
            print(sanitize_error(traceback.format_exc(), secrets))

            sp_error = settings.screenshot_path("99-error")
            try:
                page.screenshot(path=sp_error, full_page=True)
            except Exception as screenshot_error:
                log("WARN", f"异常截图失败: {screenshot_error}")
                sp_error = None

            notify_telegram(settings, False, "异常", error_msg, sp_error)
            return EXIT_FAILED

        finally:
            try:
                context.close()
            except Exception as close_error:
                log("WARN", f"关闭浏览器上下文失败: {close_error}")
            finally:
                browser.close()
                log("INFO", "🔒 浏览器已关闭")


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
