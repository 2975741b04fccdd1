"""
通道預覽模組

將停用的色彩通道歸零，僅供預覽使用，不影響去背比對
"""

from smart_cutout.data_model import EnabledChannels, RasterImage


def apply_channel_mask(image: RasterImage, channels: EnabledChannels) -> RasterImage:
    """
    將停用通道設為 0（alpha 不變）

    Args:
        image: 輸入圖片（不會被修改）
        channels: 啟用的通道

    Returns:
        新的預覽圖片
    """
    pixels = image.pixels.copy()
    for i, enabled in enumerate((channels.r, channels.g, channels.b)):
        if not enabled:
            pixels[:, :, i] = 0
    return RasterImage(pixels)


class ChannelMasker:
    """綁定通道設定的預覽濾鏡"""

    def __init__(self, channels: EnabledChannels) -> None:
        self.channels = channels

    def apply(self, image: RasterImage) -> RasterImage:
        """套用通道遮罩"""
        return apply_channel_mask(image, self.channels)
