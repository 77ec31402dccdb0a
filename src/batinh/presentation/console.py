"""Console transport."""

import asyncio
import logging
import sys
import threading
from typing import TextIO

from batinh.application.use_cases import ReadingResult, ReadingService, ReadingStatus

logger = logging.getLogger(__name__)

CLEAR_COMMANDS = frozenset({"/clear", "/reset"})
QUIT_COMMANDS = frozenset({"/quit", "/exit"})
PROMPT = "> "


class ConsoleSession:
    """Reads caller messages line by line and prints readings.

    Commands: /clear forgets the conversation, /quit exits. cancel()
    aborts the reading in progress.
    """

    def __init__(
        self,
        reading_service: ReadingService,
        caller_id: str = "console",
        *,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            reading_service: Reading service.
            caller_id: Identity used for every message.
            input_stream: Line source (defaults to stdin).
            output_stream: Answer sink (defaults to stdout).
        """
        self._reading_service = reading_service
        self._caller_id = caller_id
        self._input = input_stream or sys.stdin
        self._output = output_stream or sys.stdout
        self._cancel_event: asyncio.Event | None = None

    def cancel(self) -> bool:
        """Cancel the reading in progress.

        Returns:
            True if a reading was in progress.
        """
        if self._cancel_event is None:
            return False
        self._cancel_event.set()
        return True

    async def run(self) -> None:
        """Process lines until end of input or a quit command."""
        lines: asyncio.Queue[str] = asyncio.Queue()
        # A blocked readline must not delay exit
        reader = threading.Thread(
            target=self._read_lines,
            args=(asyncio.get_running_loop(), lines),
            name="console-reader",
            daemon=True,
        )
        reader.start()
        while True:
            self._write(PROMPT, newline=False)
            line = await lines.get()
            if not line:
                break
            text = line.strip()
            if not text:
                continue
            if text in QUIT_COMMANDS:
                break
            if text in CLEAR_COMMANDS:
                await self._reading_service.clear_conversation(self._caller_id)
                self._write("Đã xóa cuộc hội thoại.")
                continue
            result = await self.ask(text)
            self._write(self.format_result(result))

    async def ask(self, message: str) -> ReadingResult:
        """Answer one message."""
        self._cancel_event = asyncio.Event()
        try:
            return await self._reading_service.handle_message(
                self._caller_id, message, cancel_event=self._cancel_event
            )
        finally:
            self._cancel_event = None

    @staticmethod
    def format_result(result: ReadingResult) -> str:
        """Format a result for display."""
        if result.status is ReadingStatus.OK:
            return result.answer
        return f"[{result.status.value}] {result.answer}"

    def _write(self, text: str, *, newline: bool = True) -> None:
        self._output.write(text + ("\n" if newline else ""))
        self._output.flush()

    def _read_lines(
        self, loop: asyncio.AbstractEventLoop, lines: asyncio.Queue[str]
    ) -> None:
        while True:
            try:
                line = self._input.readline()
            except (OSError, ValueError):
                logger.debug("Console input closed", exc_info=True)
                line = ""
            try:
                loop.call_soon_threadsafe(lines.put_nowait, line)
            except RuntimeError:
                # Event loop already closed
                return
            if not line:
                return
