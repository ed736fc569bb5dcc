"""Main CLI application using Typer."""
import asyncio

import typer
from rich.console import Console

from .. import __version__
from ..chat import CompletionGateway, StreamRelay
from ..config import load_settings
from ..exceptions import ConfigurationError
from ..llm import create_llm_provider

app = typer.Typer(
    name="llmtui",
    help="Terminal chat client for streaming language-model completions",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


@app.command()
def chat(
    provider: str | None = typer.Option(
        None,
        "--provider",
        "-p",
        help="LLM provider: openai, deepseek or anthropic (default: LLM_PROVIDER or openai)"
    ),
    model: str | None = typer.Option(
        None,
        "--model",
        "-m",
        help="Model identifier (default: OPENAI_MODEL or gpt-4o)"
    ),
    no_stream: bool = typer.Option(
        False,
        "--no-stream",
        help="Request whole replies instead of streaming them"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the interactive chat TUI."""
    async def _chat() -> int:
        from ..ui import run_chat_tui

        try:
            settings = load_settings(
                provider=provider,
                model=model,
                stream=False if no_stream else None,
            )
        except ConfigurationError as e:
            # Shown inside the TUI; only quit is accepted
            return await run_chat_tui(relay=None, fatal_error=str(e), log_level=log_level)

        llm = create_llm_provider(
            settings.provider,
            api_key=settings.api_key,
            model=settings.model,
            base_url=settings.base_url,
        )
        gateway = CompletionGateway(llm, model=settings.model, stream=settings.stream)
        relay = StreamRelay(
            gateway,
            capacity=settings.conduit_capacity,
            poll_interval=settings.poll_interval,
        )
        try:
            return await run_chat_tui(
                relay=relay,
                log_level=log_level,
                system_prompt=settings.system_prompt,
            )
        finally:
            await llm.close()

    try:
        return_code = asyncio.run(_chat())
    except KeyboardInterrupt:
        return_code = 0
    except Exception as e:
        console.print(f"[red]Error running program: {e}[/red]")
        raise typer.Exit(code=1)

    if return_code:
        raise typer.Exit(code=return_code)


@app.command()
def version():
    """Show the installed version."""
    console.print(f"llmtui {__version__}")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
