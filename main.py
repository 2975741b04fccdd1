#!/usr/bin/env python3
"""
智慧去背工具

主程式進入點，使用現代化 CLI 介面

使用方法:
    uv run main.py
"""

import logging
import sys

from smart_cutout.app import ApplicationService
from smart_cutout.settings import settings


def main() -> int:
    """
    主程式

    Returns:
        退出碼 (0: 成功, 1: 失敗, 130: 中斷)
    """
    logging.basicConfig(level=settings.log_level.upper(), format="%(message)s")
    return ApplicationService().run()


if __name__ == "__main__":
    sys.exit(main())
