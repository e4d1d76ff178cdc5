#!/usr/bin/env python3
"""
Citation Monitor — 入口
监控 INSPIRE-HEP 上被追踪论文的新引用，推送到 Telegram 频道

用法:
    python main.py                  # 机器人模式（接收聊天命令）
    python main.py --once           # 对所有被追踪论文巡检一次
    python main.py --check 2670073  # 手动检查一篇
    python main.py --add 2670073    # 加入监控
    python main.py --remove 2670073 # 移出监控
    python main.py --list           # 查看监控列表
"""

import sys
import argparse

from agents.errors import CitationError
from bot.app import CitationBot
from config.settings import load_settings
from notifier.telegram_bot import describe_error, format_citations


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Citation Monitor — INSPIRE-HEP 新引用推送",
    )
    action = parser.add_mutually_exclusive_group()
    action.add_argument(
        "--once", action="store_true",
        help="对所有被追踪论文巡检一次后退出",
    )
    action.add_argument("--check", metavar="PAPER_ID", help="检查一篇论文的新引用")
    action.add_argument("--add", metavar="PAPER_ID", help="加入监控列表")
    action.add_argument("--remove", metavar="PAPER_ID", help="移出监控列表")
    action.add_argument("--list", action="store_true", help="列出被追踪论文")

    parser.add_argument("--data-dir", default=None, help="数据目录（默认 data/）")
    parser.add_argument(
        "--backend", choices=["json", "sqlite"], default=None,
        help="存储后端（默认 json）",
    )
    parser.add_argument(
        "--interval", type=int, default=None,
        help="定时巡检间隔（小时，默认 24）",
    )
    parser.add_argument(
        "--delay", type=float, default=None,
        help="巡检时两篇论文之间的停顿（秒，默认 20）",
    )
    return parser.parse_args(argv)


def run_command(bot: CitationBot, args) -> int:
    service = bot.service
    try:
        if args.once:
            report = bot.monitor.sweep()
            return 1 if report.failed else 0

        if args.check:
            citations = service.check_citations(args.check)
            if citations:
                print(format_citations(service.paper_title(args.check), citations))
            else:
                print("No new citations found.")
        elif args.add:
            print(f"Successfully started tracking: {service.add_paper(args.add)}.")
        elif args.remove:
            removed = service.remove_paper(args.remove)
            print("Successfully stopped tracking the paper."
                  if removed else "That paper was not being tracked.")
        elif args.list:
            papers = service.list_tracked_papers()
            if not papers:
                print("No tracked papers found.")
            for paper in papers:
                print(f"{paper.title} (ID: {paper.paper_id})")
    except CitationError as e:
        print(f"❌ {describe_error(e)} ({e})", file=sys.stderr)
        return 1
    return 0


def main(argv=None):
    args = parse_args(argv)

    overrides = {}
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.backend is not None:
        overrides["storage_backend"] = args.backend
    if args.interval is not None:
        overrides["monitor_interval_hours"] = args.interval
    if args.delay is not None:
        overrides["paper_delay"] = args.delay

    settings = load_settings(**overrides)
    bot = CitationBot(settings)

    try:
        if args.once or args.check or args.add or args.remove or args.list:
            return run_command(bot, args)

        print("🚀 Citation Monitor")
        print(f"   存储: {settings.storage_backend} ({settings.data_dir})")
        print(f"   Telegram: {'✅' if settings.telegram_bot_token else '❌'}")
        print(f"   频道限制: {settings.telegram_chat_id or '无'}")
        print()
        bot.run_forever()
    except KeyboardInterrupt:
        print("\n\n👋 程序已停止")
    finally:
        bot.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
