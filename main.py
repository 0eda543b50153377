"""Punto de entrada: servidor HTTP del roster y comandos administrativos."""

import argparse
import os
import sys

from dotenv import load_dotenv

# Cargar variables de entorno antes de construir backends
load_dotenv()

from worldstate.core import admin, create_store
from worldstate.logging_config import get_logger, setup_api_logging, setup_cli_logging
from worldstate.persistence import BackendError
from worldstate.persistence.json_backend import JsonFileBackend


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="worldstate", description="Estado compartido de jugadores")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Arranca la API HTTP")
    serve.add_argument("--host", default=os.getenv("WORLDSTATE_HOST", "127.0.0.1"))
    serve.add_argument("--port", type=int, default=int(os.getenv("WORLDSTATE_PORT", "8000")))

    sub.add_parser("list", help="Muestra el roster completo")
    sub.add_parser("init", help="Crea la cabecera de la tabla si está vacía")

    provision = sub.add_parser("provision", help="Da de alta un jugador")
    provision.add_argument("user_id", type=int)
    provision.add_argument("color")

    color = sub.add_parser("color", help="Cambia el color de un jugador")
    color.add_argument("user_id", type=int)
    color.add_argument("color")

    remove = sub.add_parser("remove", help="Elimina un jugador")
    remove.add_argument("user_id", type=int)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Función principal."""
    args = _build_parser().parse_args(argv)

    if args.command == "serve":
        import uvicorn

        setup_api_logging()
        uvicorn.run("worldstate.api.app:app", host=args.host, port=args.port)
        return 0

    setup_cli_logging()
    logger = get_logger("CLI")
    try:
        store = create_store()
        backend = store.backend
        if args.command == "list":
            result = store.try_read_all()
            if not result.ok:
                print(f"Error: {result.error.value}: {result.detail}")
                return 1
            for record in result.value:
                state = "online" if record.online else "offline"
                print(f"{record.user_id:>6}  ({record.x}, {record.y})  {state:<7}  notif={record.notification}  {record.color}")
            print(f"Total: {len(result.value)} jugadores")
        elif args.command == "init":
            if isinstance(backend, JsonFileBackend) and backend.create_table():
                print(f"Tabla creada en {backend.path}")
            created = admin.ensure_header(backend)
            print("Cabecera creada" if created else "La tabla ya tenía cabecera")
        elif args.command == "provision":
            row = admin.provision_player(backend, args.user_id, args.color)
            print(f"Jugador {args.user_id} creado en fila {row}")
        elif args.command == "color":
            if not admin.assign_color(backend, args.user_id, args.color):
                print(f"userId {args.user_id} no encontrado")
                return 1
        elif args.command == "remove":
            if not admin.remove_player(backend, args.user_id):
                print(f"userId {args.user_id} no encontrado")
                return 1
    except (BackendError, RuntimeError, ValueError) as e:
        logger.error("Error en %s: %s", args.command, e)
        print(f"\nError: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
