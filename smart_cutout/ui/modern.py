"""
現代化互動式使用者介面

使用 InquirerPy 提供去背參數設定流程
- 方向鍵選擇選項
- 記住最近使用的圖片與參數
- 自動偵測背景色並作為預設值
"""

import logging
from collections.abc import Callable
from pathlib import Path

from InquirerPy import inquirer
from InquirerPy.base.control import Choice
from InquirerPy.separator import Separator

from smart_cutout.common import is_hex_color
from smart_cutout.data_model import (
    DEFAULT_BACKGROUND_COLOR,
    CutoutConfig,
    CutoutParameters,
    is_supported_image,
)
from smart_cutout.ui.history import PathHistory, SettingsHistory


logger = logging.getLogger(__name__)

# UI 輸入範圍
MIN_AREA_UI_MAX = 1000

BackgroundDetector = Callable[[Path], str]


class ModernUI:
    """
    現代化使用者介面

    操作流程：
    1. 選擇圖片
    2. 自動偵測背景色
    3. 設定去背參數（可恢復預設值）
    4. 直接執行（無確認提示）
    """

    def __init__(
        self,
        detector: BackgroundDetector,
        history_dir: Path | None = None,
    ) -> None:
        """
        初始化 UI

        Args:
            detector: 背景色偵測函數（輸入圖片路徑，回傳色碼）
            history_dir: 歷史記錄所在目錄
        """
        self._detector = detector
        self._history = PathHistory(history_dir)
        self._settings = SettingsHistory(history_dir)

    def run(self) -> CutoutConfig | None:
        """
        執行互動式設定流程

        Returns:
            去背設定，若使用者取消則返回 None
        """
        self._show_welcome()

        # 步驟 1: 選擇圖片
        image_path = self._select_image()
        if image_path is None:
            return None

        # 步驟 2: 偵測背景色
        try:
            detected = self._detector(image_path)
        except (OSError, ValueError) as exc:
            logger.debug("Background detection failed", exc_info=True)
            print(f"\n⚠️  無法讀取圖片: {exc}\n")
            return self.run()

        print(f"\n🎯 自動偵測背景色: {detected}\n")

        # 步驟 3: 設定參數
        parameters = self._configure_parameters(detected)
        if parameters is None:
            # 返回步驟 1
            return self.run()

        preview = inquirer.confirm(
            message="同時輸出通道預覽圖?",
            default=False,
        ).execute()

        self._history.save(image_path)
        self._settings.save(parameters)

        return CutoutConfig(
            input_path=image_path,
            parameters=parameters,
            save_channel_preview=bool(preview),
        )

    def _show_welcome(self) -> None:
        """顯示歡迎訊息"""
        print("\n" + "=" * 60)
        print("✂️  智慧去背工具  ✂️".center(60))
        print("=" * 60)
        print("\n💡 提示：使用 ↑↓ 方向鍵選擇，空白鍵勾選，Enter 確認\n")

    def _select_image(self) -> Path | None:
        """
        選擇圖片

        Returns:
            圖片路徑，若取消則返回 None
        """
        recent_paths = self._history.load()
        choices: list[Choice | Separator] = []

        if recent_paths:
            choices.append(Separator("🖼️  最近使用"))
            for path in recent_paths[:5]:  # 只顯示最近 5 個
                choices.append(Choice(value=path, name=f"  {path.name} ({path.parent})"))
            choices.append(Separator())

        choices.append(Choice(value="__custom__", name="📝 輸入圖片路徑..."))
        choices.append(Choice(value=None, name="🚪 離開"))

        selected = inquirer.select(
            message="選擇要去背的圖片:",
            choices=choices,
            default=recent_paths[0] if recent_paths else "__custom__",
            vi_mode=True,
        ).execute()

        if selected is None:
            return None

        if selected == "__custom__":
            path_str = inquirer.filepath(
                message="輸入圖片路徑:",
                default=str(Path.cwd()),
                validate=lambda p: is_supported_image(Path(p)),
                invalid_message="檔案不存在或格式不支援",
            ).execute()

            if path_str is None:
                return self._select_image()

            selected = Path(path_str)

        return Path(selected)

    def _select_background_color(self, detected: str, current: str) -> str | None:
        """
        選擇背景色

        Args:
            detected: 自動偵測的色碼
            current: 上一次使用的色碼

        Returns:
            色碼，若取消則返回 None
        """
        choices: list[Choice | Separator] = [
            Separator("🎨 背景顏色"),
            Choice(value=detected, name=f"  自動偵測: {detected}"),
        ]
        if current.lower() != detected.lower():
            choices.append(Choice(value=current, name=f"  上次使用: {current}"))
        choices.append(Choice(value=DEFAULT_BACKGROUND_COLOR, name="  白色: #ffffff"))
        choices.append(Choice(value="__custom__", name="📝 自訂色碼..."))

        color = inquirer.select(
            message="選擇背景色:",
            choices=choices,
            default=detected,
            vi_mode=True,
        ).execute()

        if color == "__custom__":
            color = inquirer.text(
                message="輸入色碼 (#RRGGBB):",
                default=detected,
                validate=is_hex_color,
                invalid_message="請輸入六位十六進位色碼，例如 #ffffff",
            ).execute()

        return color

    def _configure_parameters(self, detected: str) -> CutoutParameters | None:
        """
        設定去背參數

        Args:
            detected: 自動偵測的背景色

        Returns:
            去背參數，若取消則返回 None
        """
        base = CutoutParameters.defaults()
        saved = self._settings.load()
        if saved is not None:
            start = inquirer.select(
                message="參數起點:",
                choices=[
                    Choice(value="saved", name="💾 使用上次參數"),
                    Choice(value="defaults", name="🔄 恢復預設值"),
                ],
                default="saved",
            ).execute()
            if start is None:
                return None
            if start == "saved":
                base = saved

        color = self._select_background_color(detected, base.background_color)
        if color is None:
            return None

        channels = inquirer.checkbox(
            message="啟用的色彩通道:",
            choices=[
                Choice(value="r", name="R 紅色通道", enabled=base.enable_r),
                Choice(value="g", name="G 綠色通道", enabled=base.enable_g),
                Choice(value="b", name="B 藍色通道", enabled=base.enable_b),
            ],
        ).execute()
        if channels is None:
            return None
        if not channels:
            print("⚠️  未啟用任何通道，將不會移除任何像素")

        tolerance = inquirer.number(
            message="顏色容差 (0-100):",
            min_allowed=0,
            max_allowed=100,
            default=base.color_tolerance,
            filter=int,
        ).execute()
        if tolerance is None:
            return None

        edge_transparency = inquirer.number(
            message="邊緣透明度 (0.0-1.0, 1 為不羽化):",
            min_allowed=0.0,
            max_allowed=1.0,
            default=base.edge_transparency,
            float_allowed=True,
            filter=float,
        ).execute()
        if edge_transparency is None:
            return None

        min_area = inquirer.number(
            message=f"最小移除面積 (1-{MIN_AREA_UI_MAX} 像素):",
            min_allowed=1,
            max_allowed=MIN_AREA_UI_MAX,
            default=min(base.min_pixel_area, MIN_AREA_UI_MAX),
            filter=int,
        ).execute()
        if min_area is None:
            return None

        return base.updated(
            background_color=color,
            enable_r="r" in channels,
            enable_g="g" in channels,
            enable_b="b" in channels,
            color_tolerance=tolerance,
            edge_transparency=edge_transparency,
            min_pixel_area=min_area,
        )

    def show_summary(self, config: CutoutConfig) -> None:
        """
        顯示處理摘要

        Args:
            config: 去背設定
        """
        params = config.parameters
        flags = (params.enable_r, params.enable_g, params.enable_b)
        enabled = "".join(name for name, on in zip("RGB", flags, strict=True) if on)
        print("\n" + "=" * 60)
        print("📋 去背設定摘要".center(60))
        print("=" * 60)
        print(f"\n  🖼️  輸入圖片: {config.input_path}")
        print(f"  🎨 背景色: {params.background_color}")
        print(f"  🔧 通道: {enabled or '(無)'}")
        print(f"  🎚️  容差: {params.color_tolerance}")
        print(f"  🌫️  邊緣透明度: {params.edge_transparency:.2f}")
        print(f"  📐 最小面積: {params.min_pixel_area}")
        print(f"  📂 輸出: {config.output_path}")
        print("\n" + "=" * 60)
        print("\n⏳ 開始處理...\n")
