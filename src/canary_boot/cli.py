# src/canary_boot/cli.py
"""
Ponto de entrada de linha de comando do Canary Boot.

    canary-boot --config config.yaml [--local config.local.yaml]
                [--non-interactive] [--debug]

O processo devolve o código de saída decidido pelo coordenador. Erros
fatais saem por `ErrorEscalation` (SystemExit) e nunca chegam aqui como
exceção comum.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from typing import List, Optional

from canary_boot import SERVER_NAME, __version__
from canary_boot.core.context import BootContext
from canary_boot.core.coordinator import BootstrapCoordinator
from canary_boot.core.errors import FatalError, exception_to_error
from canary_boot.core.escalation import EXIT_FAILURE, ErrorEscalation
from canary_boot.core.services.manager import ServiceManager
from canary_boot.stages.startup import build_startup_pipeline

LOG_FORMAT = "[%(asctime)s.%(msecs)03d] [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="canary-boot", description=f"Start the {SERVER_NAME} server process")
    p.add_argument("--config", required=True, help="Default configuration file (YAML or JSON)")
    p.add_argument("--local", default=None, help="Local overrides; copied from <local>.dist when missing")
    p.add_argument("--non-interactive", action="store_true", help="Do not wait for Enter on fatal errors")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def install_signal_handlers(services: ServiceManager) -> None:
    """
    SIGINT/SIGTERM durante o laço de serviço param o ServiceManager e o
    coordenador desliga o resto. Antes disso (start-up em andamento ou
    travado), o sinal aborta o processo com EXIT_FAILURE.
    """

    def _stop(signum, _frame) -> None:
        log = logging.getLogger("canary_boot")
        if not services.is_serving:
            log.warning("Received signal %d before the server was online, aborting", signum)
            raise SystemExit(EXIT_FAILURE)
        log.info("Received signal %d, stopping services", signum)
        services.stop()

    signal.signal(signal.SIGINT, _stop)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, _stop)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    ctx = BootContext.create(config_path=args.config, local_config_path=args.local)
    escalation = ErrorEscalation(interactive=not args.non_interactive)
    coordinator = BootstrapCoordinator(
        ctx=ctx,
        pipeline=build_startup_pipeline(),
        escalation=escalation,
    )
    install_signal_handlers(ctx.services)

    try:
        return coordinator.run()
    except MemoryError as e:
        ctx.workers.request_shutdown_all()
        error = exception_to_error(e)
        escalation.escalate(FatalError(stage_name="memory", message=error.message, error=error))


if __name__ == "__main__":
    sys.exit(main())
