from .gemini import GeminiImageClient, ImageClient

__all__ = ["GeminiImageClient", "ImageClient"]
