from genai_bridge.config.settings import Config, config

__all__ = ["Config", "config"]
