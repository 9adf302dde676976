"""
Script loader for the hosted checkout script.

One ``ScriptLoader`` belongs to one mounted checkout session. It injects the
script element at most once, fans the load/error signal out to whoever is
waiting, and removes the element on release. Signals arriving after release
are dropped.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

import httpx

from storefront.logging_config import get_logger

from .widget import CHECKOUT_SCRIPT_URL, ScriptHost

logger = get_logger(__name__)

LoadedCallback = Callable[[], None]
FailedCallback = Callable[[Optional[BaseException]], None]


class LoaderStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"
    RELEASED = "released"


class ScriptLoader:
    def __init__(self, host: ScriptHost, src: str = CHECKOUT_SCRIPT_URL):
        self.src = src
        self.status = LoaderStatus.IDLE
        self._host = host
        self._element: Any = None
        self._error: Optional[BaseException] = None
        self._waiters: List[Tuple[LoadedCallback, FailedCallback]] = []

    @property
    def injected(self) -> bool:
        return self._element is not None

    def ensure_loaded(self, on_loaded: LoadedCallback, on_failed: FailedCallback) -> None:
        """
        Make sure the checkout script is present, then signal.

        The first call injects the script element; later calls in the same
        mount only wait on (or replay) the outcome of that one injection.
        """
        if self.status is LoaderStatus.RELEASED:
            raise RuntimeError("script loader has been released")
        if self.status is LoaderStatus.LOADED:
            on_loaded()
            return
        if self.status is LoaderStatus.FAILED:
            on_failed(self._error)
            return

        self._waiters.append((on_loaded, on_failed))
        if self.status is LoaderStatus.IDLE:
            self.status = LoaderStatus.LOADING
            logger.debug("checkout_script_injecting", src=self.src)
            element = self._host.append_script(self.src, self._handle_load, self._handle_error)
            if self.status is LoaderStatus.RELEASED:
                # released from inside a synchronous load/error signal
                self._host.remove_script(element)
                logger.debug("checkout_script_released", src=self.src, pending=False)
            else:
                self._element = element

    def release(self) -> None:
        """Remove the injected script. Safe to call in any state, any number of times."""
        if self.status is LoaderStatus.RELEASED:
            return
        pending = self.status is LoaderStatus.LOADING
        self.status = LoaderStatus.RELEASED
        self._waiters = []
        if self._element is not None:
            self._host.remove_script(self._element)
            self._element = None
        logger.debug("checkout_script_released", src=self.src, pending=pending)

    def _handle_load(self) -> None:
        if self.status is not LoaderStatus.LOADING:
            logger.debug("checkout_script_signal_ignored", signal="load", status=self.status.value)
            return
        self.status = LoaderStatus.LOADED
        waiters, self._waiters = self._waiters, []
        for on_loaded, _ in waiters:
            if self.status is LoaderStatus.RELEASED:
                break
            on_loaded()

    def _handle_error(self, error: Optional[BaseException] = None) -> None:
        if self.status is not LoaderStatus.LOADING:
            logger.debug("checkout_script_signal_ignored", signal="error", status=self.status.value)
            return
        self.status = LoaderStatus.FAILED
        self._error = error
        logger.warning("checkout_script_load_failed", src=self.src, error=str(error) if error else None)
        waiters, self._waiters = self._waiters, []
        for _, on_failed in waiters:
            if self.status is LoaderStatus.RELEASED:
                break
            on_failed(error)


@dataclass
class ScriptElement:
    src: str
    task: Optional["asyncio.Task[None]"] = None
    body: Optional[str] = None


class HttpScriptHost:
    """
    A ``ScriptHost`` that fetches scripts with httpx on the running event loop.

    Useful server-side, e.g. to check that the hosted checkout script is
    reachable before offering online payment.
    """

    def __init__(self, timeout: float = 15.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._timeout = timeout
        self._transport = transport
        self.scripts: List[ScriptElement] = []

    def append_script(self, src: str, on_load: LoadedCallback, on_error: FailedCallback) -> ScriptElement:
        element = ScriptElement(src=src)
        element.task = asyncio.get_running_loop().create_task(self._fetch(element, on_load, on_error))
        self.scripts.append(element)
        return element

    def remove_script(self, element: ScriptElement) -> None:
        if element.task is not None and not element.task.done():
            element.task.cancel()
        if element in self.scripts:
            self.scripts.remove(element)

    async def _fetch(self, element: ScriptElement, on_load: LoadedCallback, on_error: FailedCallback) -> None:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                r = await client.get(element.src)
                r.raise_for_status()
        except httpx.HTTPError as e:
            on_error(e)
            return
        element.body = r.text
        on_load()
