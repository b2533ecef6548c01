"""Command line entrypoint: run the API server or an interactive chat client."""

import argparse
import asyncio
import logging
from typing import Callable, Optional, Sequence

import uvicorn

from veo_studio.client.controller import VideoStudioController, open_client
from veo_studio.config import settings
from veo_studio.logging_config import configure_logging
from veo_studio.services.command_parser import ALLOWED_DURATIONS, LANDSCAPE, PORTRAIT

logger = logging.getLogger(__name__)

FORM_COMMANDS = ("/prompt", "/duration", "/aspect")

HELP_TEXT = (
    "Type a command such as '3 minutes 9:16 forest in rain'.\n"
    "  /prompt <text>                  set the prompt directly\n"
    "  /duration <88|60|180|300|600>   set the duration in seconds\n"
    "  /aspect <16:9|9:16>             set the aspect ratio\n"
    "  /generate                       start a video with the current settings\n"
    "  /show                           print the current settings\n"
    "  /quit                           exit"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Veo Studio mock video generator")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--host", default=settings.app_host, help="Bind address (default: %(default)s)")
    serve.add_argument("--port", type=int, default=settings.app_port, help="TCP port (default: %(default)s)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for local development.")
    serve.add_argument(
        "--log-level",
        default=settings.log_level.lower(),
        choices=["critical", "error", "warning", "info", "debug"],
        help="Log level (default: %(default)s)",
    )

    chat = subparsers.add_parser("chat", help="Interactive chat client against a running API")
    chat.add_argument("--base-url", default=settings.api_base_url, help="API base URL (default: %(default)s)")
    return parser


def describe(controller: VideoStudioController) -> str:
    prompt = controller.prompt or "(empty)"
    return f"prompt={prompt!r} duration={controller.duration_seconds}s aspect={controller.aspect_ratio}"


def apply_form_command(controller: VideoStudioController, name: str, value: str) -> str:
    """Set one request field the way the form does; values outside the choices are refused."""
    value = value.strip()
    if name == "/prompt":
        if not value:
            return "Usage: /prompt <text>"
        controller.prompt = value[: settings.prompt_char_limit]
    elif name == "/duration":
        choices = ", ".join(str(seconds) for seconds in ALLOWED_DURATIONS)
        if not value.isdigit() or int(value) not in ALLOWED_DURATIONS:
            return f"Duration must be one of: {choices}"
        controller.duration_seconds = int(value)
    elif name == "/aspect":
        if value not in (LANDSCAPE, PORTRAIT):
            return f"Aspect must be {LANDSCAPE} or {PORTRAIT}"
        controller.aspect_ratio = value
    return describe(controller)


async def run_chat(base_url: str, read_line: Callable[[str], str] = input) -> None:
    print(HELP_TEXT)
    async with open_client(base_url) as client:
        controller = VideoStudioController(client)
        while True:
            try:
                line = (await asyncio.to_thread(read_line, "> ")).strip()
            except EOFError:
                break

            if not line:
                continue
            if line == "/quit":
                break
            if line == "/show":
                print(describe(controller))
            elif line.partition(" ")[0] in FORM_COMMANDS:
                name, _, value = line.partition(" ")
                print(apply_form_command(controller, name, value))
            elif line == "/generate":
                if not controller.prompt.strip():
                    print("Set a prompt first.")
                    continue
                print("Generating...")
                url = await controller.generate()
                print(f"Video: {url}" if url else "No video yet.")
            else:
                reply = await controller.submit_chat(line)
                print(reply.reply if reply else "The server did not answer.")


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        configure_logging(args.log_level)
        logger.info("Starting API on %s:%s", args.host, args.port)
        uvicorn.run(
            "veo_studio.app:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level,
        )
        return

    configure_logging("WARNING")
    asyncio.run(run_chat(args.base_url))


if __name__ == "__main__":
    main()
