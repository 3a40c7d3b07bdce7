"""
Streaming relay between the model provider and the HTTP response.

The relay owns the provider stream for one turn:
- prime() waits for the first fragment so early provider failures can still
  become proper HTTP errors
- a producer task appends every fragment to the accumulator, then hands it
  to the caller through a queue
- when the provider stream ends (normally, by error, on the stream deadline,
  or because the caller went away) the accumulated text is passed to the
  completion callback in a background task that the response never awaits
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable, Optional

from providers.exceptions import ProviderUnavailableError

logger = logging.getLogger(__name__)

# Background tasks are held here so they are not garbage collected mid-flight
_background_tasks: set[asyncio.Task] = set()

_END = object()


@dataclass(frozen=True)
class RelayResult:
    """Outcome of a relayed stream."""

    content: str
    fragments: int
    cancelled: bool
    should_persist: bool


RelayCallback = Callable[[RelayResult], Awaitable[None]]


class StreamingRelay:
    """
    Relays one provider stream to one caller and reports the full text.

    The bytes delivered to the caller are always a prefix of the text passed
    to the completion callback. On a normal end they are identical.

    Args:
        fragments: Provider stream of text fragments
        on_complete: Called once with the RelayResult after the stream ends
        timeout: Seconds allowed until the first fragment arrives
        stream_timeout: Seconds allowed for the whole provider stream,
            counted from prime(). Defaults to timeout.
        persist_partial: Whether text from a cancelled stream should be kept
        provider_name: Provider name used in error reports
    """

    def __init__(
        self,
        fragments: AsyncIterator[str],
        on_complete: RelayCallback,
        timeout: float,
        stream_timeout: Optional[float] = None,
        persist_partial: bool = True,
        provider_name: str = "llm",
    ):
        self._source = fragments
        self._on_complete = on_complete
        self._timeout = timeout
        self._stream_timeout = max(stream_timeout or timeout, timeout)
        self._persist_partial = persist_partial
        self._provider_name = provider_name

        self._queue: asyncio.Queue = asyncio.Queue()
        self._parts: list[str] = []
        self._first: Optional[str] = None
        self._deadline: Optional[float] = None
        self._producer: Optional[asyncio.Task] = None
        self._finished = False

        self.result: asyncio.Future[RelayResult] = asyncio.get_running_loop().create_future()
        self.persistence: Optional[asyncio.Task] = None

    @property
    def content(self) -> str:
        """Text accumulated so far."""
        return "".join(self._parts)

    async def prime(self) -> None:
        """
        Wait for the first fragment.

        Raises:
            ProviderRejectedError: If the provider refused the request
            ProviderUnavailableError: If the provider failed, timed out or
                ended the stream without any text
        """
        now = asyncio.get_running_loop().time()
        self._deadline = now + self._stream_timeout
        try:
            self._first = await self._next_fragment(now + self._timeout)
        except StopAsyncIteration:
            logger.warning("Provider stream ended before the first fragment")
            await self._close_source()
            raise ProviderUnavailableError(self._provider_name, "Empty response")
        except asyncio.TimeoutError:
            await self._close_source()
            raise ProviderUnavailableError(
                self._provider_name,
                f"No response within {self._timeout:g}s",
            )
        except BaseException:
            await self._close_source()
            raise

    def start(self) -> None:
        """Start relaying in the background."""
        if self._producer is not None:
            raise RuntimeError("Relay already started")
        if self._deadline is None:
            self._deadline = asyncio.get_running_loop().time() + self._stream_timeout
        self._producer = asyncio.create_task(self._produce())

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """
        Yield UTF-8 encoded fragments until the provider stream ends.

        Closing this iterator early cancels the provider stream.
        """
        if self._producer is None:
            self.start()
        try:
            while True:
                item = await self._queue.get()
                if item is _END:
                    break
                yield item.encode("utf-8")
        finally:
            if self._producer is not None and not self._producer.done():
                logger.info("Caller disconnected mid-stream, cancelling provider stream")
                self._producer.cancel()

    async def aclose(self) -> None:
        """Abandon a relay that was primed but never started."""
        if self._producer is None:
            await self._close_source()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    async def _next_fragment(self, deadline: Optional[float] = None) -> str:
        deadline = min(deadline, self._deadline) if deadline is not None else self._deadline
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            raise asyncio.TimeoutError()
        return await asyncio.wait_for(self._source.__anext__(), remaining)

    def _publish(self, fragment: str) -> None:
        # Accumulate first: the caller never sees text the callback won't get
        self._parts.append(fragment)
        self._queue.put_nowait(fragment)

    async def _produce(self) -> None:
        cancelled = False
        try:
            if self._first is not None:
                self._publish(self._first)
            while True:
                try:
                    fragment = await self._next_fragment()
                except StopAsyncIteration:
                    break
                self._publish(fragment)
        except asyncio.CancelledError:
            cancelled = True
            raise
        except asyncio.TimeoutError:
            logger.warning(
                f"Provider stream exceeded {self._stream_timeout:g}s, ending turn early"
            )
        except Exception as e:
            logger.warning(f"Provider stream failed mid-turn, ending turn early: {e}")
        finally:
            self._queue.put_nowait(_END)
            self._finish(cancelled)
            await self._close_source()

    def _finish(self, cancelled: bool) -> None:
        if self._finished:
            return
        self._finished = True

        content = self.content
        should_persist = bool(content) and (self._persist_partial or not cancelled)
        result = RelayResult(
            content=content,
            fragments=len(self._parts),
            cancelled=cancelled,
            should_persist=should_persist,
        )
        if not self.result.done():
            self.result.set_result(result)

        task = asyncio.create_task(self._run_callback(result))
        _background_tasks.add(task)
        task.add_done_callback(_background_tasks.discard)
        self.persistence = task

    async def _run_callback(self, result: RelayResult) -> None:
        try:
            await self._on_complete(result)
        except Exception:
            logger.exception("Turn completion callback failed")

    async def _close_source(self) -> None:
        aclose = getattr(self._source, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception as e:
            logger.warning(f"Error closing provider stream: {e}")
