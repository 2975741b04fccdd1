"""
應用程式設定

使用 Pydantic BaseSettings 管理環境變數和配置
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    應用程式設定

    從環境變數（前綴 CUTOUT_）和 .env 文件讀取設定

    Attributes:
        log_level: 日誌級別 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_image_size: 最大圖片邊長（像素），超過時拒絕處理
        output_suffix: 輸出檔名後綴
        preview_suffix: 通道預覽檔名後綴
        history_dir: 歷史記錄檔案所在目錄（None 表示目前工作目錄）
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CUTOUT_",
        case_sensitive=False,
    )

    # 日誌設定
    log_level: str = "INFO"

    # 圖片處理設定
    max_image_size: int = Field(default=4096, ge=1)  # 最大邊長（像素）
    output_suffix: str = "_cutout"
    preview_suffix: str = "_channels"

    # 歷史記錄
    history_dir: Path | None = None


# 創建全局設定實例
settings = AppSettings()
