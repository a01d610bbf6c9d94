"""Q8_0 quantised dot products, an aiohttp chat handler, streamed uploads and a task command."""

__version__ = "0.1.0"

__all__ = ["chat", "quant", "uploads", "xtask"]