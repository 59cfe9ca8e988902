"""
LLM Debug Logger for tracking all LLM API calls.

Supports configurable log levels (NONE, INFO, DEBUG, TRACE) and dual output:
- Console: Human-readable formatted output
- File: JSON Lines format for parsing and analysis

Inline image payloads are never written out; they are replaced by a short
summary with the image type and encoded size.
"""

import asyncio
import json
import os
import time
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv


class LogLevel(Enum):
    """Logging levels for LLM debug output."""

    NONE = 0
    INFO = 1
    DEBUG = 2
    TRACE = 3


def _summarize_data_uri(url: str) -> str:
    if "data:image/" in url and "base64," in url:
        header, payload = url.split("base64,", 1)
        image_type = header.split("image/", 1)[1].split(";", 1)[0]
        return f"[IMAGE_DATA: {image_type}, base64 encoded, {len(payload):,} bytes]"
    return f"[IMAGE_URL: {url[:100]}]"


class LLMLogger:
    """Centralized logger for LLM API calls with configurable levels."""

    _instance: Optional["LLMLogger"] = None

    def __new__(cls):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize the logger with configuration from environment."""
        if self._initialized:
            return

        load_dotenv()

        level_str = os.getenv("LLM_DEBUG_LEVEL", "NONE").upper()
        try:
            self.level = LogLevel[level_str]
        except KeyError:
            self.level = LogLevel.NONE

        self.log_to_file = os.getenv("LLM_LOG_TO_FILE", "true").lower() == "true"
        self.log_dir = Path(os.getenv("LLM_LOG_DIR", "outputs"))

        self._initialized = True

    def should_log(self, min_level: LogLevel) -> bool:
        """Check if we should log at the given level."""
        return self.level.value >= min_level.value

    def _timestamp(self) -> str:
        return datetime.now().isoformat()

    def _truncate(self, content: str, max_len: int = 200) -> str:
        if len(content) <= max_len:
            return content
        return content[:max_len] + "... [truncated]"

    def strip_images(self, content: Any) -> Any:
        """Replace inline image parts in message content with text summaries."""
        if isinstance(content, str):
            return content
        if not isinstance(content, list):
            return content

        stripped = []
        for item in content:
            if not isinstance(item, dict):
                stripped.append(item)
                continue
            item_type = item.get("type")
            if item_type == "image_url":
                url = item.get("image_url", {})
                url = url.get("url", "") if isinstance(url, dict) else str(url)
                stripped.append({"type": "text", "text": _summarize_data_uri(url)})
            elif item_type == "image":
                source = item.get("source", {})
                stripped.append({
                    "type": "text",
                    "text": (
                        f"[IMAGE_DATA: {source.get('media_type', 'unknown')}, base64 encoded, "
                        f"{len(source.get('data', '')):,} bytes]"
                    ),
                })
            else:
                stripped.append(item)
        return stripped

    def _content_to_text(self, content: Any) -> str:
        content = self.strip_images(content)
        if isinstance(content, str):
            return content
        return json.dumps(content, indent=2, ensure_ascii=False)

    def _serialize_message(self, msg: Any) -> Dict[str, Any]:
        if hasattr(msg, "content"):
            return {"type": msg.__class__.__name__, "content": self.strip_images(msg.content)}
        return {"type": type(msg).__name__, "content": str(msg)}

    def _write_to_file(self, run_id: Optional[str], log_entry: Dict[str, Any]):
        """Write log entry to JSON Lines file."""
        if not self.log_to_file or not run_id:
            return

        log_file = self.log_dir / run_id / "logs" / "llm_calls.jsonl"
        log_file.parent.mkdir(parents=True, exist_ok=True)

        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + "\n")

    def log_invocation(
        self,
        component: str,
        provider: str,
        model: str,
        run_id: Optional[str] = None,
    ) -> str:
        """
        Log the start of an LLM invocation.

        Returns:
            Invocation ID (UUID string), or "" when logging is disabled
        """
        if not self.should_log(LogLevel.INFO):
            return ""

        invocation_id = str(uuid.uuid4())
        console_msg = f"[{self._timestamp()}] 🔵 LLM Call: [{component}] {provider}/{model}"
        if run_id:
            console_msg += f" | run_id: {run_id}"
        print(console_msg)
        return invocation_id

    def log_request(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        messages: List[Any],
        sampling: Optional[Dict[str, Any]] = None,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log LLM request details."""
        if not self.should_log(LogLevel.DEBUG):
            return

        print(f"  Messages: {len(messages)}")
        for i, msg in enumerate(messages):
            preview = self._truncate(self._content_to_text(getattr(msg, "content", msg)), 150)
            print(f"    {i+1}. [{msg.__class__.__name__}] {preview}")

        self._write_to_file(run_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "request",
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "run_id": run_id,
            "request": {
                "messages": (
                    [self._serialize_message(msg) for msg in messages]
                    if self.level == LogLevel.TRACE
                    else []
                ),
                "message_count": len(messages),
                "sampling": sampling or {},
            },
            "metadata": metadata or {},
        })

    def log_response(
        self,
        invocation_id: str,
        component: str,
        provider: str,
        model: str,
        response: Any,
        start_time: float,
        end_time: float,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Log LLM response with timing and token usage."""
        if not self.should_log(LogLevel.INFO):
            return

        latency_ms = (end_time - start_time) * 1000
        content = self._content_to_text(getattr(response, "content", response))

        token_usage = {}
        usage = getattr(response, "usage_metadata", None)
        if usage:
            token_usage = {
                "prompt_tokens": usage.get("input_tokens"),
                "completion_tokens": usage.get("output_tokens"),
                "total_tokens": usage.get("total_tokens"),
            }

        parts = [f"[{component}]", f"{provider}/{model}", f"{latency_ms:.1f}ms"]
        if token_usage.get("total_tokens") is not None:
            parts.append(f"{token_usage['total_tokens']} tokens")
        print(f"[{self._timestamp()}] ✅ LLM Response: " + " | ".join(parts))

        if self.should_log(LogLevel.TRACE):
            print("  RESPONSE:")
            for line in self._truncate(content, 1000).split("\n"):
                print(f"    {line}")
        elif self.should_log(LogLevel.DEBUG):
            print(f"  Response: {self._truncate(content, 200)}")

        self._write_to_file(run_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "response",
            "component": component,
            "invocation_id": invocation_id,
            "provider": provider,
            "model": model,
            "run_id": run_id,
            "response": {
                "content": content if self.level == LogLevel.TRACE else None,
                "content_preview": (
                    self._truncate(content, 200)
                    if self.should_log(LogLevel.DEBUG)
                    else None
                ),
                "content_length": len(content),
            },
            "timing": {
                "latency_ms": latency_ms,
                "start_time": datetime.fromtimestamp(start_time).isoformat(),
                "end_time": datetime.fromtimestamp(end_time).isoformat(),
            },
            "usage": token_usage or None,
            "metadata": metadata or {},
        })

    def log_error(
        self,
        invocation_id: str,
        component: str,
        error: BaseException,
        run_id: Optional[str] = None,
    ):
        """Log a failed LLM call."""
        if not self.should_log(LogLevel.INFO):
            return

        print(f"[{self._timestamp()}] ❌ LLM Error: [{component}] {type(error).__name__}: {error}")
        self._write_to_file(run_id, {
            "timestamp": self._timestamp(),
            "level": self.level.name,
            "event": "error",
            "component": component,
            "invocation_id": invocation_id,
            "run_id": run_id,
            "error": {"type": type(error).__name__, "message": str(error)},
        })


def get_logger() -> LLMLogger:
    """Get the singleton logger instance."""
    return LLMLogger()


class LoggedLLM:
    """
    Wrapper around LangChain chat models to add debug logging.

    Intercepts ainvoke() calls and logs requests, responses,
    timing, and metadata.
    """

    def __init__(
        self,
        llm_instance: Any,
        component: str,
        provider: str,
        model: str,
        run_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize LoggedLLM wrapper.

        Args:
            llm_instance: The actual chat model (ChatGoogleGenerativeAI, ChatOpenAI or ChatAnthropic)
            component: Component name (e.g., "vision", "generator")
            provider: Provider name ("google", "openai" or "anthropic")
            model: Model name
            run_id: Optional orchestration run ID for tracking
            metadata: Optional additional metadata to include in logs
        """
        self.llm = llm_instance
        self.component = component
        self.provider = provider
        self.model = model
        self.run_id = run_id
        self.metadata = metadata or {}
        self.logger = get_logger()

    def __getattr__(self, name: str):
        """Delegate all other attributes to wrapped LLM instance."""
        return getattr(self.llm, name)

    def _sampling(self) -> Dict[str, Any]:
        return {
            "temperature": getattr(self.llm, "temperature", None),
            "max_tokens": getattr(self.llm, "max_tokens", None)
            or getattr(self.llm, "max_output_tokens", None),
            "top_p": getattr(self.llm, "top_p", None),
        }

    def _start(self, messages: List[Any]) -> str:
        invocation_id = self.logger.log_invocation(
            component=self.component,
            provider=self.provider,
            model=self.model,
            run_id=self.run_id,
        )
        if invocation_id:
            self.logger.log_request(
                invocation_id=invocation_id,
                component=self.component,
                provider=self.provider,
                model=self.model,
                messages=messages,
                sampling=self._sampling(),
                run_id=self.run_id,
                metadata=self.metadata,
            )
        return invocation_id

    def _finish(self, invocation_id: str, response: Any, start_time: float):
        self.logger.log_response(
            invocation_id=invocation_id,
            component=self.component,
            provider=self.provider,
            model=self.model,
            response=response,
            start_time=start_time,
            end_time=time.time(),
            run_id=self.run_id,
            metadata=self.metadata,
        )

    async def ainvoke(self, messages: List[Any], **kwargs) -> Any:
        """
        Asynchronously invoke the chat model with logging.

        Console and file logging run in a worker thread, off the event loop.
        """
        invocation_id = await asyncio.to_thread(self._start, messages)
        if not invocation_id:
            return await self.llm.ainvoke(messages, **kwargs)

        start_time = time.time()
        try:
            response = await self.llm.ainvoke(messages, **kwargs)
        except Exception as e:
            await asyncio.to_thread(
                self.logger.log_error, invocation_id, self.component, e, run_id=self.run_id
            )
            raise
        await asyncio.to_thread(self._finish, invocation_id, response, start_time)
        return response
