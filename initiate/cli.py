"""
Command-line interface for the Initiate voice assistant.

Runs the HTTP server or a single orchestration straight from the terminal,
using Rich for output.
"""
import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from initiate.app.config.settings import settings
from initiate.app.dependencies import get_tool_registry
from initiate.app.models.domain.conversation import OrchestrationResult
from initiate.app.models.domain.error import AssistantError
from initiate.app.prompts.assistant_prompt import watch_system_prompt
from initiate.app.services.chat_completion_service import ChatCompletionService
from initiate.app.services.conversation_orchestrator import ConversationOrchestrator
from initiate.app.services.transcription_service import TranscriptionService
from initiate.app.usecases.voice_query_usecase import VoiceQueryUsecase
from initiate.app.utils.logger import setup_logger

console = Console()


def _pretty(content: str) -> str:
    try:
        return json.dumps(json.loads(content), indent=2)
    except ValueError:
        return content


def render_result(result: OrchestrationResult) -> None:
    for tool_call in result.tool_calls:
        console.print(
            Panel(
                Text(tool_call.raw_arguments),
                title=f"Tool call: {tool_call.name}",
                border_style="cyan",
            )
        )
    for tool_result in result.tool_results:
        console.print(
            Panel(
                Text(_pretty(tool_result.content)),
                title=f"Result: {tool_result.tool_name}",
                border_style="green" if tool_result.ok else "red",
            )
        )
    console.print(
        Panel(
            Text(result.final_content or "(no content)"),
            title="Assistant",
            border_style="blue",
        )
    )


def _fail(error: AssistantError) -> None:
    console.print(Panel(Text(error.message), title="Error", border_style="red"))
    raise SystemExit(1)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: Optional[str]):
    """Blockchain voice assistant backend."""
    setup_logger(level=log_level or settings.LOG_LEVEL, fmt=settings.LOG_FORMAT)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Interface to bind")
@click.option("--port", default=8000, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str, port: int, reload: bool):
    """Run the HTTP API."""
    uvicorn.run("initiate.main:app", host=host, port=port, reload=reload)


@cli.command()
@click.argument("text")
@click.option("--watch", is_flag=True, help="Use the short watch-style answers")
def ask(text: str, watch: bool):
    """Ask one question and show the tool round."""
    system_prompt = (
        watch_system_prompt(settings.DEFAULT_WALLET_ADDRESS) if watch else None
    )
    orchestrator = ConversationOrchestrator(
        ChatCompletionService(settings), get_tool_registry(), system_prompt
    )
    try:
        with console.status("Thinking..."):
            result = asyncio.run(
                orchestrator.run([{"role": "user", "content": text}])
            )
    except AssistantError as e:
        _fail(e)
    render_result(result)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "audio_format", default=None, help="Declared audio format")
def transcribe(file: Path, audio_format: Optional[str]):
    """Transcribe a local recording and answer it."""
    usecase = VoiceQueryUsecase(
        TranscriptionService(settings),
        ChatCompletionService(settings),
        get_tool_registry(),
        settings,
    )
    try:
        with console.status("Transcribing..."):
            response = asyncio.run(
                usecase.execute_bytes(
                    file.read_bytes(), audio_format or file.suffix.lstrip(".")
                )
            )
    except AssistantError as e:
        _fail(e)

    transcription = response["transcription"]
    console.print(
        Panel(
            Text(transcription["text"]),
            title=f"Heard (confidence {transcription['confidence']})",
            border_style="magenta",
        )
    )
    for tool_call in response["toolCalls"]:
        console.print(f"[cyan]Tool call:[/cyan] {tool_call['function']['name']}")
    console.print(
        Panel(Text(response["finalContent"]), title="Assistant", border_style="blue")
    )


@cli.command()
def tools():
    """List the tools offered to the chat model."""
    table = Table(title="Registered tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Required")
    table.add_column("Description")
    for definition in get_tool_registry().definitions():
        table.add_row(
            definition.name,
            ", ".join(definition.required) or "-",
            definition.description,
        )
    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
