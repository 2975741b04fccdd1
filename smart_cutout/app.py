"""
應用程式服務層

提供依賴注入和業務邏輯編排
"""

import logging
from collections.abc import Callable

from smart_cutout.core.processor import CutoutProcessor
from smart_cutout.core.progress import PhaseProgressBar
from smart_cutout.data_model import CutoutConfig, CutoutResult
from smart_cutout.settings import settings
from smart_cutout.ui import ModernUI


logger = logging.getLogger(__name__)


class ApplicationService:
    """
    應用程式服務

    協調 UI、處理器與進度顯示，實現依賴反轉原則 (DIP)
    """

    def __init__(
        self,
        ui: ModernUI | None = None,
        processor_factory: Callable[..., CutoutProcessor] = CutoutProcessor,
    ):
        """
        初始化應用程式服務

        Args:
            ui: 使用者介面 (可注入，預設為 ModernUI)
            processor_factory: 處理器工廠 (可注入以供測試)
        """
        self.processor_factory = processor_factory
        self.ui = ui or ModernUI(
            detector=processor_factory().detect_background,
            history_dir=settings.history_dir,
        )

    def run(self) -> int:
        """
        執行應用程式主循環

        Returns:
            退出碼 (0: 成功, 1: 失敗, 130: 中斷)
        """
        try:
            while True:
                # 1. 獲取使用者配置
                config = self.ui.run()
                if config is None:
                    print("\n👋 再見！")
                    return 0

                # 2. 顯示處理摘要
                self.ui.show_summary(config)

                # 3. 處理圖片（單張失敗不中斷主循環）
                try:
                    result = self._process_image(config)
                except (OSError, ValueError) as exc:
                    logger.error("Failed to process %s: %s", config.input_path, exc)
                    print(f"\n❌ 處理失敗: {exc}\n")
                    continue

                # 4. 顯示結果
                self._display_result(result)

                # 5. 自動返回主選單
                print("🔄 返回主選單...\n")

        except KeyboardInterrupt:
            print("\n\n👋 已中斷操作，再見！")
            return 130

        except Exception:
            logger.exception("應用程式執行錯誤")
            print("\n❌ 應用程式發生錯誤，請查看日誌\n")
            return 1

    def _process_image(self, config: CutoutConfig) -> CutoutResult:
        """
        處理圖片

        Args:
            config: 去背設定

        Returns:
            處理結果
        """
        with PhaseProgressBar(config.input_path.name) as bar:
            processor = self.processor_factory(progress_callback=bar)
            return processor.process(config)

    def _display_result(self, result: CutoutResult) -> None:
        """
        顯示處理結果

        Args:
            result: 處理結果
        """
        print("\n" + "=" * 60)
        print("✅ 去背完成！".center(60))
        print("=" * 60)
        print(f"\n  📐 尺寸: {result.width}x{result.height}")
        print(f"  🫥 透明像素: {result.removed_pixels} ({result.removed_ratio:.1%})")
        print(f"  🌫️  羽化像素: {result.feathered_pixels}")
        print(f"  📂 輸出: {result.output_path}")
        if result.preview_path is not None:
            print(f"  🔍 通道預覽: {result.preview_path}")
        print("\n" + "=" * 60 + "\n")
