from dataclasses import dataclass
import os

from dotenv import load_dotenv


@dataclass
class ChatbotConfig:
    access_map_path: str = "access_map.json"
    query_log_path: str = "chat_log.txt"
    top_k: int = 10
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "ChatbotConfig":
        load_dotenv()
        return cls(
            access_map_path=os.environ.get("ACCESS_MAP_PATH", cls.access_map_path),
            query_log_path=os.environ.get("QUERY_LOG_PATH", cls.query_log_path),
            top_k=int(os.environ.get("RETRIEVAL_TOP_K", cls.top_k)),
            host=os.environ.get("CHAT_HOST", cls.host),
            port=int(os.environ.get("CHAT_PORT", cls.port)),
        )
