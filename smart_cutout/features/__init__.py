"""
功能模組

各項圖片處理功能的實作
"""
