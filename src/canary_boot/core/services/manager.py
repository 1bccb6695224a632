# src/canary_boot/core/services/manager.py
"""
ServiceManager: conjunto de listeners de rede do processo.

Serviços são adicionados pelos Stages do pipeline antes do handshake e
lidos pela thread principal depois dele; por isso o conjunto não precisa
de lock além do que o próprio bind exige.

Decisões arquiteturais:
    - Falha de bind é logada e o serviço não é registrado (best-effort)
    - Porta 0 desabilita o serviço
    - Vários protocolos podem dividir uma porta, exceto se algum deles
      fala primeiro
    - `run()` bloqueia no laço de accept até `stop()`

Limites explícitos:
    - Não implementa protocolos nem demultiplexação por primeiro byte:
      a conexão aceita vai para o primeiro protocolo da porta com handler
"""

from __future__ import annotations

import logging
import selectors
import socket
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .protocols import ProtocolDescriptor

logger = logging.getLogger(__name__)

DEFAULT_BIND_HOST = "0.0.0.0"

Binder = Callable[[str, int], socket.socket]


def bind_listener(host: str, port: int) -> socket.socket:
    """Abre um socket TCP em modo listen, não bloqueante."""
    listener = socket.create_server((host, port))
    listener.setblocking(False)
    return listener


@dataclass
class ServicePort:
    """Um listener e os protocolos que ele atende."""

    port: int
    listener: socket.socket
    protocols: List[ProtocolDescriptor] = field(default_factory=list)

    @property
    def is_single_socket(self) -> bool:
        return any(p.server_sends_first for p in self.protocols)

    def protocol_names(self) -> str:
        return ", ".join(p.name for p in self.protocols)

    def on_accept(self, conn: socket.socket, address: Tuple) -> None:
        for protocol in self.protocols:
            if protocol.handler is not None:
                protocol.handler(conn, address)
                return
        conn.close()

    def close(self) -> None:
        try:
            self.listener.close()
        except OSError as e:
            logger.debug("[ServicePort::close] port %d: %s", self.port, e)


class ServiceManager:
    """Registra listeners e roda o laço de accept do processo."""

    def __init__(self, *, host: str = DEFAULT_BIND_HOST, binder: Optional[Binder] = None):
        self.host = host
        self._binder: Binder = binder or bind_listener
        self._ports: Dict[int, ServicePort] = {}
        self._stop_requested = threading.Event()
        self._serving = threading.Event()
        # reentrante: `stop()` pode rodar num handler de sinal na thread de `run()`
        self._wake_lock = threading.RLock()
        self._wake_writer: Optional[socket.socket] = None

    # -----------------------------
    # Registro
    # -----------------------------
    def add(self, protocol: ProtocolDescriptor, port: int, *, host: Optional[str] = None) -> bool:
        if port == 0:
            logger.error("No port provided for service %s. Service disabled.", protocol.name)
            return False

        existing = self._ports.get(port)
        if existing is not None:
            if existing.is_single_socket or protocol.server_sends_first:
                logger.error(
                    "%s and %s cannot use the same port %d.",
                    protocol.name,
                    existing.protocol_names(),
                    port,
                )
                return False
            existing.protocols.append(protocol)
            logger.info("Service %s added on port %d", protocol.name, port)
            return True

        bind_host = host or self.host
        try:
            listener = self._binder(bind_host, port)
        except OSError as e:
            logger.error("[ServicePort::open] Error binding %s to %s:%d: %s", protocol.name, bind_host, port, e)
            return False

        self._ports[port] = ServicePort(port=port, listener=listener, protocols=[protocol])
        logger.info("Service %s listening on %s:%d", protocol.name, bind_host, port)
        return True

    def is_running(self) -> bool:
        return bool(self._ports)

    @property
    def services(self) -> List[Tuple[str, int]]:
        return [(p.name, sp.port) for sp in self._ports.values() for p in sp.protocols]

    @property
    def is_serving(self) -> bool:
        return self._serving.is_set()

    def wait_serving(self, timeout: Optional[float] = None) -> bool:
        return self._serving.wait(timeout)

    # -----------------------------
    # Laço de serviço
    # -----------------------------
    def run(self) -> None:
        reader, writer = socket.socketpair()
        reader.setblocking(False)
        with self._wake_lock:
            self._wake_writer = writer

        selector = selectors.DefaultSelector()
        selector.register(reader, selectors.EVENT_READ, None)
        for service_port in self._ports.values():
            service_port.listener.setblocking(False)
            selector.register(service_port.listener, selectors.EVENT_READ, service_port)

        self._serving.set()
        try:
            while not self._stop_requested.is_set():
                for key, _ in selector.select():
                    if key.data is None:
                        continue
                    self._accept(key.data)
        finally:
            self._serving.clear()
            selector.close()
            with self._wake_lock:
                self._wake_writer = None
            reader.close()
            writer.close()
            for service_port in self._ports.values():
                service_port.close()
            logger.info("Service manager stopped")

    def _accept(self, service_port: ServicePort) -> None:
        try:
            conn, address = service_port.listener.accept()
        except (BlockingIOError, InterruptedError):
            return
        except OSError as e:
            logger.error("[ServicePort::accept] port %d: %s", service_port.port, e)
            return
        service_port.on_accept(conn, address)

    def stop(self) -> None:
        self._stop_requested.set()
        with self._wake_lock:
            if self._wake_writer is not None:
                try:
                    self._wake_writer.send(b"\0")
                except OSError as e:
                    logger.debug("[ServiceManager::stop] wake-up failed: %s", e)
