# tests/core/services/test_service_manager.py
"""
Testes do ServiceManager.

Os testes asseguram que:
- falha de bind é logada e o serviço não é registrado
- porta 0 desabilita o serviço sem tentar bind
- protocolos que não falam primeiro dividem a porta
- protocolos que falam primeiro exigem porta exclusiva
- `run()` bloqueia até `stop()` e aceita conexões no meio do caminho
"""

import socket
import threading

from canary_boot.core.services.manager import ServiceManager
from canary_boot.core.services.protocols import (
    GAME_PROTOCOL,
    LOGIN_PROTOCOL,
    STATUS_PROTOCOL,
    ProtocolDescriptor,
)


def test_bind_failure_is_logged_and_not_registered(failing_binder, caplog):
    services = ServiceManager(binder=failing_binder)

    assert services.add(LOGIN_PROTOCOL, 7171) is False
    assert services.is_running() is False
    assert failing_binder.calls == [("0.0.0.0", 7171)]
    assert "Error binding login protocol" in caplog.text


def test_port_zero_disables_service(ephemeral_binder):
    services = ServiceManager(binder=ephemeral_binder)

    assert services.add(STATUS_PROTOCOL, 0) is False
    assert ephemeral_binder.requested == []
    assert services.is_running() is False


def test_shared_port_for_protocols_that_wait_for_client(ephemeral_binder):
    services = ServiceManager(host="127.0.0.1", binder=ephemeral_binder)

    assert services.add(LOGIN_PROTOCOL, 7171) is True
    assert services.add(STATUS_PROTOCOL, 7171) is True

    assert services.services == [("login protocol", 7171), ("status protocol", 7171)]
    assert len(ephemeral_binder.requested) == 1


def test_server_first_protocol_needs_exclusive_port(ephemeral_binder, caplog):
    services = ServiceManager(host="127.0.0.1", binder=ephemeral_binder)

    assert services.add(GAME_PROTOCOL, 7172) is True
    assert services.add(STATUS_PROTOCOL, 7172) is False
    assert "cannot use the same port" in caplog.text


def test_host_override_per_service(ephemeral_binder):
    services = ServiceManager(host="0.0.0.0", binder=ephemeral_binder)

    services.add(LOGIN_PROTOCOL, 7171, host="127.0.0.1")

    assert ephemeral_binder.requested == [("127.0.0.1", 7171)]


def test_run_blocks_until_stop_and_dispatches_connections(ephemeral_binder):
    accepted = threading.Event()

    def handler(conn, address):
        conn.close()
        accepted.set()

    protocol = ProtocolDescriptor(name="echo protocol", handler=handler)
    services = ServiceManager(host="127.0.0.1", binder=ephemeral_binder)
    assert services.add(protocol, 9000) is True
    listener_port = services._ports[9000].listener.getsockname()[1]

    loop = threading.Thread(target=services.run)
    loop.start()
    try:
        assert services.wait_serving(timeout=2.0)
        assert loop.is_alive()

        client = socket.create_connection(("127.0.0.1", listener_port), timeout=2.0)
        client.close()
        assert accepted.wait(timeout=2.0)
    finally:
        services.stop()
        loop.join(timeout=2.0)

    assert not loop.is_alive()
    assert services.is_serving is False


def test_stop_before_run_makes_run_return():
    services = ServiceManager()
    services.stop()

    loop = threading.Thread(target=services.run)
    loop.start()
    loop.join(timeout=2.0)

    assert not loop.is_alive()


def test_stop_is_reentrant_on_the_serving_thread():
    services = ServiceManager()

    def _stop_while_holding_wake_lock():
        # mesma situação de um sinal entregue enquanto run() segura o lock
        with services._wake_lock:
            services.stop()

    worker = threading.Thread(target=_stop_while_holding_wake_lock, daemon=True)
    worker.start()
    worker.join(timeout=2.0)

    assert not worker.is_alive()
